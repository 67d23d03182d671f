"""Pipeline execution infrastructure."""
from .discovery import SourceWalker, find_source_files
from .processor import FileProcessor, Mode, ProcessorConfig
from .runner import RunResult, run_cleanup
from .ui import console, print_header, print_error, print_warning, print_success, print_status_panel

__all__ = [
    "SourceWalker", "find_source_files", "FileProcessor", "Mode", "ProcessorConfig",
    "RunResult", "run_cleanup",
    "console", "print_header", "print_error", "print_warning", "print_success", "print_status_panel",
]
