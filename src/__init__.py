"""Finance engine source package."""
