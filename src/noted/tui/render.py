"""Rich renderables for the vault flow screens.

Styling only: everything shown here comes from the public state of
VaultFlow and DirectoryPicker.
"""

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from noted.tui.directory_picker import DirectoryPicker
from noted.tui.vault_flow import FlowState, OutcomeKind, VaultFlow

HEADER_STYLE = "bold color(63)"
SELECTED_STYLE = "bold color(230) on color(63)"
BUTTON_STYLE = "bold color(99)"
HELP_STYLE = "color(245) dim"
ERROR_STYLE = "bold color(9)"
SUCCESS_STYLE = "bold color(10)"
PATH_STYLE = "dim"


def _help(text: str) -> Text:
    return Text(text, style=HELP_STYLE)


def _error(message: str) -> Text | None:
    if not message:
        return None
    return Text(f"✗ {message}", style=ERROR_STYLE)


def _panel(*parts: RenderableType | None, border: str = "color(63)") -> Panel:
    body = Group(*(p for p in parts if p is not None))
    return Panel(body, box=box.ROUNDED, border_style=border, padding=(1, 2), expand=False)


def render_picker(picker: DirectoryPicker) -> RenderableType:
    rows = []
    for i, path in picker.visible_candidates():
        style = SELECTED_STYLE if i == picker.highlighted else ""
        rows.append(Text(f" {path} ", style=style))

    if picker.input_text:
        field = Text(picker.input_text)
    else:
        field = Text(picker.PLACEHOLDER, style=PATH_STYLE)

    return _panel(
        Text("Select or enter a directory:", style=HEADER_STYLE),
        Panel(field, box=box.ROUNDED, border_style="color(63)"),
        *rows,
        _error(picker.error),
        Text(),
        _help("[Enter] Select   [↑/↓] Navigate   [Esc] Cancel"),
    )


def _render_listing(flow: VaultFlow) -> RenderableType:
    rows = []
    for i, item in enumerate(flow.items):
        selected = i == flow.highlighted
        if not item.is_vault:
            style = BUTTON_STYLE + (" reverse" if selected else "")
            rows.append(Text(f" {item.label} ", style=style))
            continue
        row = Text(f" {item.name} ", style=SELECTED_STYLE if selected else "")
        row.append(f" {item.path}", style=PATH_STYLE)
        if item.path == flow.registry.current_vault_path:
            row.append("  (current)", style=SUCCESS_STYLE)
        rows.append(row)

    return _panel(
        Text(flow.TITLE, style=HEADER_STYLE),
        *rows,
        _error(flow.error),
        Text(),
        _help("↑/↓: Move   Enter: Select   D: Delete   q: Quit"),
    )


def _render_naming(flow: VaultFlow) -> RenderableType:
    return _panel(
        Text("Enter a name for your new vault (default: folder name):", style=HEADER_STYLE),
        Panel(Text(flow.name_input), box=box.ROUNDED, border_style="color(63)"),
        Text(flow.pending_path, style=PATH_STYLE),
        _error(flow.error),
        Text(),
        _help("[Enter] Confirm   [Esc] Back"),
    )


def _render_delete_confirm(flow: VaultFlow) -> RenderableType:
    question, note = flow.delete_prompt()
    return Panel(
        Group(
            Text(question),
            Text(note, style=PATH_STYLE),
        ),
        box=box.SQUARE,
        border_style="color(99)",
        padding=(1, 2),
        expand=False,
    )


def render_outcome(flow: VaultFlow) -> RenderableType:
    outcome = flow.outcome
    if outcome.kind is OutcomeKind.ERROR:
        return Text(f"Error: {outcome.error}", style=ERROR_STYLE)
    if outcome.kind is OutcomeKind.CANCELLED:
        return Text("Cancelled.", style=ERROR_STYLE)
    return _panel(
        Text("✓ Vault set!", style=SUCCESS_STYLE),
        Text(f"Current vault: {outcome.vault.name}", style=HEADER_STYLE),
        Text(outcome.vault.path),
    )


def render_flow(flow: VaultFlow) -> RenderableType:
    """Renderable for whichever screen the flow is on."""
    if flow.state is FlowState.PICKING_DIRECTORY:
        return render_picker(flow.picker)
    if flow.state is FlowState.NAMING_VAULT:
        return _render_naming(flow)
    if flow.state is FlowState.CONFIRMING_DELETION:
        return _render_delete_confirm(flow)
    if flow.state is FlowState.DONE:
        return render_outcome(flow)
    return _render_listing(flow)
