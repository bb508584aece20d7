"""
CWLV Main Application - Log group browser and search using Textual
"""
from typing import Optional

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from CWLV.config import Settings
from CWLV.engine.coordinator import LogStoreGateway
from CWLV.UI.views.log_viewer import LogViewerView


class LogViewerApp(App):
    """CloudWatch-style Log Viewer - Terminal UI Application"""

    TITLE = "CWLV - CloudWatch Log Viewer"
    CSS_PATH = "cwlv.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh_groups", "Refresh Groups"),
        ("s", "search", "Search"),
        ("e", "export", "Export"),
        ("c", "clear", "Clear"),
        ("d", "dismiss_error", "Dismiss Error"),
    ]

    def __init__(self, gateway: Optional[LogStoreGateway] = None, settings: Optional[Settings] = None):
        super().__init__()
        self.gateway = gateway
        self.settings = settings

    def compose(self) -> ComposeResult:
        """Compose the main UI layout"""
        yield Header(show_clock=True)
        yield LogViewerView(gateway=self.gateway, settings=self.settings, id="log-viewer-view")
        yield Footer()

    @property
    def viewer(self) -> LogViewerView:
        return self.query_one("#log-viewer-view", LogViewerView)

    def action_refresh_groups(self) -> None:
        self.viewer.refresh_groups()

    def action_search(self) -> None:
        self.viewer.start_search()

    def action_export(self) -> None:
        self.viewer.export_results()

    def action_clear(self) -> None:
        self.viewer.clear_all()

    def action_dismiss_error(self) -> None:
        self.viewer.dismiss_error()


def run_app(settings: Optional[Settings] = None) -> None:
    """Entry point to run the CWLV application"""
    app = LogViewerApp(settings=settings)
    app.run()


if __name__ == "__main__":
    run_app()
