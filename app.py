import locale
import logging
import os

import readchar
from rich import box
from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from babelizer.form import (
    BACKSPACE,
    ENTER,
    ESCAPE,
    LEFT,
    RIGHT,
    SHIFT_TAB,
    SPACE,
    TAB,
    Effect,
    Field,
    FormState,
    Screen,
    start_processing,
    transition,
    with_types,
)
from babelizer.handlers import load_type_names, process_form

COLORS = {
    "primary": "dark_orange",
    "secondary": "white",
    "success": "green",
    "error": "red",
    "accent": "bright_yellow",
    "muted": "grey50",
}

LOG_FILE = "babelizer.log"

KEY_NAMES = {
    readchar.key.TAB: TAB,
    "\x1b[Z": SHIFT_TAB,
    readchar.key.ENTER: ENTER,
    readchar.key.CR: ENTER,
    readchar.key.LF: ENTER,
    readchar.key.BACKSPACE: BACKSPACE,
    readchar.key.CTRL_H: BACKSPACE,
    readchar.key.SPACE: SPACE,
    readchar.key.LEFT: LEFT,
    readchar.key.RIGHT: RIGHT,
}


def normalize_key(raw: str) -> str:
    if raw in KEY_NAMES:
        return KEY_NAMES[raw]
    # A bare Esc arrives as '\x1b' plus whatever was typed next.
    if raw.startswith(readchar.key.ESC):
        return ESCAPE
    return raw


# --- Rendering ---

def _field_panel(state: FormState, field: Field, title: str, hint: str, body: Text) -> Panel:
    focused = state.focused == field
    return Panel(
        body,
        title=Text.assemble((title, f"bold {COLORS['primary']}"), " ", (hint, COLORS["muted"])),
        title_align="left",
        border_style=COLORS["primary"] if focused else COLORS["muted"],
        box=box.DOUBLE if focused else box.SQUARE,
    )


def _text_input(value: str, placeholder: str, focused: bool) -> Text:
    if not value:
        txt = Text(placeholder, style=COLORS["muted"])
    else:
        txt = Text(value, style=COLORS["secondary"])
    if focused:
        txt.append("▏", style=COLORS["accent"])
    return txt


def _checkbox(state: FormState, field: Field, checked: bool, label: str) -> Text:
    focused = state.focused == field
    box_style = COLORS["primary"] if focused else COLORS["muted"]
    txt = Text()
    txt.append("[", style=box_style)
    txt.append("✓" if checked else " ", style=COLORS["primary"] if checked else COLORS["muted"])
    txt.append("] ", style=box_style)
    txt.append(label, style=COLORS["primary"] if focused else COLORS["secondary"])
    return txt


def _type_selector(state: FormState) -> Text:
    if not state.available_types:
        return Text("No compendium types found in the mapping file", style=COLORS["muted"])
    txt = Text()
    for name in state.available_types:
        if name == state.selected_type:
            txt.append(f" {name} ", style=f"bold black on {COLORS['primary']}")
        else:
            txt.append(f" {name} ", style=COLORS["secondary"])
    return txt


def _shortcuts(*pairs) -> Text:
    txt = Text(style=COLORS["muted"])
    for i, (key, action) in enumerate(pairs):
        if i:
            txt.append(" │ ")
        txt.append(key, style=COLORS["accent"])
        txt.append(f" {action}")
    return txt


def render_input(state: FormState) -> Group:
    folder = _field_panel(
        state,
        Field.INPUT_FOLDER,
        "Compendium Pack",
        "(LevelDB)",
        _text_input(state.input_folder, "e.g., packs/wfrp4e-core/actors", state.focused == Field.INPUT_FOLDER),
    )
    parts = [folder]
    if state.detected_type:
        parts.append(Text.assemble(("Detected type: ", COLORS["success"]), (state.detected_type, f"bold {COLORS['success']}")))

    parts.append(
        _field_panel(
            state,
            Field.MAPPING_FILE,
            "Mapping File",
            "(JSON)",
            _text_input(state.mapping_file, "mapping.json", state.focused == Field.MAPPING_FILE),
        )
    )
    parts.append(_field_panel(state, Field.COMPENDIUM_TYPE, "Compendium Type", "(←/→)", _type_selector(state)))
    parts.append(_checkbox(state, Field.SORT_CHECKBOX, state.sort_alphabetically, "Sort entries alphabetically"))
    parts.append(_checkbox(state, Field.ID_KEY_CHECKBOX, state.use_id_as_key, "Use ID as key instead of name"))
    parts.append(Text())
    parts.append(_shortcuts(("Tab", "Switch fields"), ("Space", "Toggle checkbox"), ("Enter", "Process"), ("Esc", "Exit")))
    return Group(*parts)


def render_processing(state: FormState) -> Align:
    return Align.center(Text(f"⏳ {state.status_message}", style=COLORS["error"]))


def render_complete(state: FormState) -> Align:
    result = state.result
    return Align.center(
        Group(
            Text("✓ Extraction Complete!", style=f"bold {COLORS['success']}"),
            Text.assemble("Label: ", (result.label, COLORS["accent"])),
            Text.assemble("Extracted ", (str(result.count), COLORS["primary"]), " entries"),
            Text.assemble("Output: ", (f"output/{result.filename}", COLORS["accent"])),
            Text(),
            _shortcuts(("R", "Process another"), ("Q/Esc", "Exit")),
        )
    )


def render_error(state: FormState) -> Align:
    return Align.center(
        Group(
            Text("✗ Error", style=f"bold {COLORS['error']}"),
            Text(state.error_message, style=COLORS["error"]),
            Text(),
            _shortcuts(("R", "Try again"), ("Q/Esc", "Exit")),
        )
    )


RENDERERS = {
    Screen.INPUT: render_input,
    Screen.PROCESSING: render_processing,
    Screen.COMPLETE: render_complete,
    Screen.ERROR: render_error,
}


def render(state: FormState) -> Panel:
    header = Group(
        Align.center(Text("BABELIZER", style=f"bold {COLORS['primary']}")),
        Align.center(Text("Foundry VTT Babele Data Extractor", style=COLORS["secondary"])),
        Text(),
    )
    return Panel(Group(header, RENDERERS[state.screen](state)), border_style=COLORS["muted"], padding=(1, 2))


# --- Event loop ---

def configure_logging() -> None:
    logging.basicConfig(
        filename=LOG_FILE,
        level=os.environ.get("BABELIZER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(console: Console = None) -> None:
    console = console or Console()
    state = with_types(FormState(), load_type_names(FormState().mapping_file))

    with Live(render(state), console=console, auto_refresh=False, screen=True) as live:
        while True:
            try:
                key = normalize_key(readchar.readkey())
            except KeyboardInterrupt:
                return

            state, effect = transition(state, key)

            if effect == Effect.QUIT:
                return
            if effect == Effect.RELOAD_TYPES:
                state = with_types(state, load_type_names(state.mapping_file))
            elif effect == Effect.RUN:
                state = with_types(state, load_type_names(state.mapping_file))
                live.update(render(start_processing(state)), refresh=True)
                state = process_form(
                    state,
                    on_status=lambda s: live.update(render(s), refresh=True),
                )

            live.update(render(state), refresh=True)


def main() -> None:
    configure_logging()
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.getLogger(__name__).warning("Falling back to the C collation order: %s", e)
    run()


if __name__ == "__main__":
    main()
