# ABOUTME: Poudre River fly report pipeline
# ABOUTME: Extracts the fishing report and resolves recommended fly images into a JSON manifest

__version__ = "0.1.0"
