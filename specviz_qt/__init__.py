"""PySide6 viewer for spectral datasets read through ``specviz.spec_io``."""
