"""Keyboard-driven state of the extractor form.

Rendering lives in ``app.py``; this module only decides what a key press does.
``transition(state, key)`` returns the next state and the side effect the UI
loop must perform, so every screen flow can be exercised without a terminal.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from .compiler import CompileResult
from .mapping import DEFAULT_MAPPING_FILE
from .naming import detect_compendium_type


class Screen(Enum):
    INPUT = 'input'
    PROCESSING = 'processing'
    COMPLETE = 'complete'
    ERROR = 'error'


class Field(Enum):
    INPUT_FOLDER = 'inputFolder'
    MAPPING_FILE = 'mappingFile'
    COMPENDIUM_TYPE = 'compendiumType'
    SORT_CHECKBOX = 'sortCheckbox'
    ID_KEY_CHECKBOX = 'idKeyCheckbox'


class Effect(Enum):
    NONE = 'none'
    RUN = 'run'
    QUIT = 'quit'
    RELOAD_TYPES = 'reload_types'


# Normalized key names produced by the UI layer; anything else of length one
# is a printable character.
TAB = 'tab'
SHIFT_TAB = 'shift-tab'
ENTER = 'enter'
ESCAPE = 'escape'
BACKSPACE = 'backspace'
SPACE = 'space'
LEFT = 'left'
RIGHT = 'right'

FIELD_ORDER = (
    Field.INPUT_FOLDER,
    Field.MAPPING_FILE,
    Field.COMPENDIUM_TYPE,
    Field.SORT_CHECKBOX,
    Field.ID_KEY_CHECKBOX,
)
TEXT_FIELDS = {Field.INPUT_FOLDER: 'input_folder', Field.MAPPING_FILE: 'mapping_file'}
CHECKBOXES = {Field.SORT_CHECKBOX: 'sort_alphabetically', Field.ID_KEY_CHECKBOX: 'use_id_as_key'}


@dataclass(frozen=True)
class FormState:
    screen: Screen = Screen.INPUT
    focused: Field = Field.INPUT_FOLDER
    input_folder: str = ''
    mapping_file: str = DEFAULT_MAPPING_FILE
    available_types: Tuple[str, ...] = ()
    selected_type: Optional[str] = None
    sort_alphabetically: bool = False
    use_id_as_key: bool = False
    status_message: str = ''
    error_message: str = ''
    result: Optional[CompileResult] = None
    # Set once the user cycles the type selector; until then the folder decides.
    type_chosen: bool = False

    @property
    def detected_type(self) -> Optional[str]:
        if not self.input_folder:
            return None
        return detect_compendium_type(self.input_folder)


def with_types(state: FormState, types: Sequence[str]) -> FormState:
    types = tuple(types)
    selected = state.selected_type
    detected = state.detected_type
    if not state.type_chosen and detected in types:
        selected = detected
    elif selected not in types:
        if types:
            selected = types[0]
        else:
            selected = None
    return replace(state, available_types=types, selected_type=selected)


def start_processing(state: FormState) -> FormState:
    return replace(state, screen=Screen.PROCESSING, status_message='', error_message='', result=None)


def set_status(state: FormState, message: str) -> FormState:
    return replace(state, status_message=message)


def complete(state: FormState, result: CompileResult) -> FormState:
    return replace(state, screen=Screen.COMPLETE, status_message='', result=result)


def fail(state: FormState, message: str) -> FormState:
    return replace(state, screen=Screen.ERROR, status_message='', error_message=message)


def _move_focus(state: FormState, step: int) -> Tuple[FormState, Effect]:
    index = FIELD_ORDER.index(state.focused)
    moved = replace(state, focused=FIELD_ORDER[(index + step) % len(FIELD_ORDER)])
    if state.focused in TEXT_FIELDS:
        return moved, Effect.RELOAD_TYPES
    return moved, Effect.NONE


def _cycle_type(state: FormState, step: int) -> FormState:
    types = state.available_types
    if not types:
        return state
    if state.selected_type in types:
        index = (types.index(state.selected_type) + step) % len(types)
    else:
        index = 0
    return replace(state, selected_type=types[index], type_chosen=True)


def _edit_text(state: FormState, key: str) -> FormState:
    attr = TEXT_FIELDS[state.focused]
    value = getattr(state, attr)
    if key == BACKSPACE:
        value = value[:-1]
    elif key == SPACE:
        value += ' '
    elif len(key) == 1 and key.isprintable():
        value += key
    else:
        return state
    return replace(state, **{attr: value})


def _input_transition(state: FormState, key: str) -> Tuple[FormState, Effect]:
    if key == ESCAPE:
        return state, Effect.QUIT
    if key == TAB:
        return _move_focus(state, 1)
    if key == SHIFT_TAB:
        return _move_focus(state, -1)
    if key == ENTER:
        return state, Effect.RUN

    if state.focused in TEXT_FIELDS:
        return _edit_text(state, key), Effect.NONE

    if state.focused == Field.COMPENDIUM_TYPE:
        if key in (RIGHT, SPACE):
            return _cycle_type(state, 1), Effect.NONE
        if key == LEFT:
            return _cycle_type(state, -1), Effect.NONE
        return state, Effect.NONE

    if key == SPACE:
        attr = CHECKBOXES[state.focused]
        return replace(state, **{attr: not getattr(state, attr)}), Effect.NONE
    return state, Effect.NONE


def transition(state: FormState, key: str) -> Tuple[FormState, Effect]:
    if state.screen == Screen.INPUT:
        return _input_transition(state, key)

    if state.screen in (Screen.COMPLETE, Screen.ERROR):
        if key in ('r', 'R'):
            return replace(
                state,
                screen=Screen.INPUT,
                result=None,
                error_message='',
                status_message='',
            ), Effect.NONE
        if key in (ESCAPE, 'q', 'Q'):
            return state, Effect.QUIT

    return state, Effect.NONE
