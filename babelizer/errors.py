from __future__ import annotations


class BabelizerError(Exception):
    """Base class for every error surfaced on the form's error screen."""


class InputFolderError(BabelizerError):
    pass


class MappingFileError(BabelizerError):
    pass


class MissingMappingError(BabelizerError):
    def __init__(self, compendium_type: str):
        super().__init__(f"No mapping found for type: {compendium_type}")
        self.compendium_type = compendium_type


class UnknownCompendiumTypeError(BabelizerError):
    def __init__(self, input_path: str):
        super().__init__(f"Unknown compendium type for path: {input_path}")
        self.input_path = input_path


class ExtractionError(BabelizerError):
    pass
