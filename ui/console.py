"""
Rich console rendering of server status records
"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config_types import UIConfig
from core.models import StatusRecord
from parsers.server_parser import MOTDParser

logger = logging.getLogger(__name__)

class ConsoleUI:
    """Renders a StatusRecord as a rich panel"""

    def __init__(self, config: Optional[UIConfig] = None, console: Optional[Console] = None):
        self.config = config or UIConfig()
        self.console = console or Console()

    def _clean(self, text: Optional[str]) -> str:
        if self.config.strip_formatting and MOTDParser.has_formatting(text):
            return MOTDParser.strip_formatting(text)
        return text or ""

    def build_panel(self, title: str, record: StatusRecord) -> Panel:
        """Build the status panel for one probed address"""
        style = "green" if record.is_online else "bright_black"

        body = []
        motd = self._clean(record.motd)
        if motd:
            body.append(Text(motd))

        # Details only make sense for a live server
        if record.is_online:
            table = Table(box=None, padding=(0, 3), header_style="bold")
            table.add_column("Version")
            table.add_column("Latency")
            table.add_column("Players")
            latency = record.latency_millis if record.latency_millis is not None else 0
            table.add_row(
                Text(self._clean(record.version) or "Unknown"),
                Text(f"{latency:g}ms"),
                Text(f"{record.online_players}/{record.max_players}")
            )
            body.append(table)

        if record.icon and self.config.show_icon_info:
            body.append(Text(f"Icon: {len(record.icon):,} bytes", style="dim"))

        footer = f"{record.state.value} • {record.probed_at.strftime('%Y-%m-%d %H:%M:%S %Z')}"
        return Panel(
            Group(*body) if body else Text(""),
            title=Text(title),
            subtitle=footer,
            border_style=style
        )

    def render(self, title: str, record: StatusRecord) -> None:
        self.console.print(self.build_panel(title, record))

    async def save_icon(self, record: StatusRecord, path: str) -> bool:
        """Write the server icon to path, False when the server sent none"""
        if not record.icon:
            logger.info("Server did not provide an icon")
            return False

        file_path = Path(path)
        if file_path.parent != Path('.'):
            file_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(file_path, 'wb') as f:
            await f.write(record.icon)

        logger.info(f"Saved {len(record.icon)} byte icon to {file_path}")
        return True
