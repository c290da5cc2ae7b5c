"""Token board page: ranked tables per view with auto-refresh.

Each view gets its own tab. An empty ranked list, whatever the cause,
renders as a "no qualifying tokens" state rather than an error.
"""

import gradio as gr
import structlog

from deployerhunter.config.settings import get_settings
from deployerhunter.core.timeutil import now_ms
from deployerhunter.models.pipeline import TokenView, ViewResult
from deployerhunter.models.token import Token
from deployerhunter.services.ranking.board import get_token_board

log = structlog.get_logger(__name__)

DEFAULT_HEADERS = ["#", "Symbol", "Name", "Holders", "Market Cap", "Deployer Bonding", "Created", "Deployer"]
MARKET_HEADERS = ["#", "Symbol", "Name", "Price", "1h Change", "1h Volume", "1h Txns", "Buys/Sells", "Market Cap"]

EMPTY_STATE_MARKDOWN = """
### NO QUALIFIED TOKENS FOUND
*Waiting for tokens that meet criteria...*
"""
SCANNING_MARKDOWN = "*Scanning blockchain...*"

# Seconds between status line updates (countdown granularity)
STATUS_TICK_SECONDS = 1


# =============================================================================
# Helper Functions - Formatting
# =============================================================================


def format_market_cap(value: float) -> str:
    """Format market cap for display."""
    if value >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.0f}"


def format_price(price: float) -> str:
    """Format price for display."""
    if price <= 0:
        return "N/A"
    if price < 0.01:
        return f"${price:.6f}"
    return f"${price:.4f}"


def format_time_ago(timestamp_ms: int, now: int) -> str:
    """Relative age of an epoch-ms timestamp, in whole minutes."""
    if timestamp_ms <= 0:
        return "Never"
    minutes = (now - timestamp_ms) // 60_000
    if minutes < 1:
        return "Just now"
    if minutes == 1:
        return "1 minute ago"
    return f"{minutes} minutes ago"


def format_countdown(seconds: int) -> str:
    """``m:ss`` countdown, clamped at zero."""
    seconds = max(0, seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_status(result: ViewResult, now: int) -> str:
    """Status line: last scan age and countdown to the next recomputation.

    A failed run shows a degraded status; the next refresh retries it.
    """
    last_scan = format_time_ago(result.last_updated, now)
    if not result.success:
        return f"🔴 **DEGRADED** · Upstream unavailable, retrying on next refresh · Last scan: {last_scan}"
    remaining = (result.next_update - now) // 1000 if result.next_update else 0
    return f"🟢 **SYSTEM ACTIVE** · NEXT UPDATE: **{format_countdown(remaining)}** · Last scan: {last_scan}"


def default_rows(tokens: list[Token], now: int) -> list[list[str]]:
    """Table rows for the default (holders) view."""
    return [
        [
            str(token.rank),
            token.symbol,
            token.name,
            str(token.holders),
            format_market_cap(token.market_cap),
            f"{token.bonding_rate:.1f}%",
            format_time_ago(token.created_at, now),
            token.deployer,
        ]
        for token in tokens
    ]


def market_rows(tokens: list[Token]) -> list[list[str]]:
    """Table rows for the trending and volume views."""
    return [
        [
            str(token.rank),
            token.symbol,
            token.name,
            format_price(token.price_usd),
            f"{token.price_change_1h:+.1f}%",
            format_market_cap(token.volume_1h),
            str(token.txns_1h),
            f"{token.buys_1h}/{token.sells_1h}",
            format_market_cap(token.market_cap),
        ]
        for token in tokens
    ]


# =============================================================================
# Refresh
# =============================================================================


def _table_updates(rows: list[list[str]]) -> tuple[dict, dict]:
    return gr.update(value=rows, visible=bool(rows)), gr.update(visible=not rows)


def refresh_status() -> str:
    """Status line from the cached default view; never calls upstreams."""
    result = get_token_board().cached_view(TokenView.DEFAULT)
    if result is None:
        return SCANNING_MARKDOWN
    return format_status(result, now_ms())


async def refresh_board() -> tuple:
    """Load every view and build component updates (status, then table/empty pairs)."""
    board = get_token_board()
    results = {view: await board.get_view(view) for view in TokenView}
    now = now_ms()

    log.debug(
        "dashboard_refreshed",
        **{view.value: len(result.tokens) for view, result in results.items()},
    )

    return (
        format_status(results[TokenView.DEFAULT], now),
        *_table_updates(default_rows(results[TokenView.DEFAULT].tokens, now)),
        *_table_updates(market_rows(results[TokenView.TRENDING].tokens)),
        *_table_updates(market_rows(results[TokenView.VOLUME].tokens)),
    )


# =============================================================================
# Page Render
# =============================================================================


def _view_tab(label: str, headers: list[str]) -> tuple[gr.Dataframe, gr.Markdown]:
    with gr.Tab(label):
        table = gr.Dataframe(headers=headers, interactive=False, wrap=True, visible=False)
        empty = gr.Markdown(EMPTY_STATE_MARKDOWN, elem_classes=["empty-state"])
    return table, empty


def render(app: gr.Blocks) -> None:
    """Render the board and wire load, timer and manual refresh."""
    settings = get_settings()

    with gr.Column():
        gr.Markdown(
            """
            # PUMPFUN
            ## DEPLOYER HUNTER
            """,
            elem_classes=["board-title"],
        )
        status = gr.Markdown(SCANNING_MARKDOWN)
        refresh_btn = gr.Button("🔄 Refresh", size="sm", variant="secondary")

        with gr.Tabs():
            default_table, default_empty = _view_tab("Top Tokens", DEFAULT_HEADERS)
            trending_table, trending_empty = _view_tab("Trending", MARKET_HEADERS)
            volume_table, volume_empty = _view_tab("Volume", MARKET_HEADERS)

        gr.Markdown(
            f"*Auto-refreshing every {settings.dashboard_refresh_seconds}s · "
            f"Criteria: {format_market_cap(settings.min_market_cap)}+ market cap · "
            f"{settings.min_holders}+ holders · deployer bonding > {settings.min_bonding_rate:.0f}% · "
            "ranked by holders*"
        )

    outputs = [
        status,
        default_table, default_empty,
        trending_table, trending_empty,
        volume_table, volume_empty,
    ]
    timer = gr.Timer(value=settings.dashboard_refresh_seconds)
    clock = gr.Timer(value=STATUS_TICK_SECONDS)

    app.load(refresh_board, outputs=outputs)
    timer.tick(refresh_board, outputs=outputs)
    refresh_btn.click(refresh_board, outputs=outputs)
    clock.tick(refresh_status, outputs=[status])
