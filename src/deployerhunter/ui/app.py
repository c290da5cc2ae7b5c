"""Main Gradio dashboard application."""

from pathlib import Path

import gradio as gr
import structlog

from deployerhunter.ui.pages import board

log = structlog.get_logger(__name__)

CSS_PATH = Path(__file__).parent / "css" / "board.css"


def create_dashboard() -> gr.Blocks:
    """Create the token board dashboard.

    Returns:
        Gradio Blocks application.
    """
    custom_css = ""
    if CSS_PATH.exists():
        custom_css = CSS_PATH.read_text()
        log.debug("dashboard_css_loaded", path=str(CSS_PATH))

    with gr.Blocks(title="Deployer Hunter") as app:
        pass

    # Theme and CSS as properties (Gradio 6.0 pattern)
    app.theme = gr.themes.Soft()
    app.css = custom_css

    with app:
        board.render(app)

    log.info("dashboard_created")

    return app
