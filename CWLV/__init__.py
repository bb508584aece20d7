"""
CWLV - CloudWatch-style log viewer

Package Structure:
- logstore: data models, error taxonomy, pagination and the HTTP client
- engine: debouncing, list virtualization and the selection coordinator
- server: FastAPI surface over a log source
- UI: Textual terminal interface
"""
__version__ = "0.1.0"
