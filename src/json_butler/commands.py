"""Host commands wiring JSON Butler to editor capabilities."""

import logging
from typing import Optional

from .butler import JSONButler
from .error_handler import ErrorHandler
from .types import (
    ButlerError,
    Clipboard,
    ContractResolverSettings,
    EditorSurface,
    MessageSink,
    NamePrompt,
    TypeResolver,
)

GENERATED_MESSAGE = "Generated type code copied to clipboard."
SERIALIZED_MESSAGE = "Serialized JSON contents copied to clipboard."
CONVERTED_MESSAGE = "Converted text copied to clipboard."
INVALID_ELEMENT_MESSAGE = "Invalid code element selected for serialization."
EMPTY_SELECTION_MESSAGE = "Select some text first."


class ButlerCommand:
    """
    Base class for host commands.

    Every capability is passed in by the host; a command keeps no state
    between executions. Fatal library errors end the command with one
    message through the MessageSink.
    """

    def __init__(self, editor: EditorSurface, clipboard: Clipboard, messages: MessageSink,
                 butler: Optional[JSONButler] = None,
                 logger: Optional[logging.Logger] = None):
        self.editor = editor
        self.clipboard = clipboard
        self.messages = messages
        self.logger = logger or logging.getLogger(__name__)
        self.butler = butler or JSONButler(logger=self.logger)
        self.error_handler = ErrorHandler(self.logger)

    def execute(self) -> bool:
        """Run the command; returns True when text was copied."""
        try:
            return self._execute()
        except ButlerError as e:
            response = self.error_handler.describe(e)
            self.messages.show_message(response.message)
            return False

    def _execute(self) -> bool:
        raise NotImplementedError


class CreateTypeFromJsonCommand(ButlerCommand):
    """Generate type source from the selected JSON sample."""

    def __init__(self, editor: EditorSurface, prompt: NamePrompt, clipboard: Clipboard,
                 messages: MessageSink, butler: Optional[JSONButler] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(editor, clipboard, messages, butler, logger)
        self.prompt = prompt

    def _execute(self) -> bool:
        selected = self.editor.get_selected_text()
        request = self.prompt.prompt_for_namespace_and_name()
        if request is None:
            self.logger.debug("Type generation cancelled")
            return False

        result = self.butler.generate_code(selected, request.namespace, request.type_name)

        if result.has_conflicts:
            summary = self.error_handler.summarize_conflicts(result.diagnostics)
            if self.butler.block_on_conflicts:
                self.messages.show_message(f"{summary}. Nothing was copied.")
                return False
            self.clipboard.copy_to_clipboard(result.source)
            self.messages.show_message(f"{GENERATED_MESSAGE} {summary}.")
            return True

        self.clipboard.copy_to_clipboard(result.source)
        self.messages.show_message(GENERATED_MESSAGE)
        return True


class SerializeTypeCommand(ButlerCommand):
    """Project the selected type into a representative JSON document."""

    def __init__(self, editor: EditorSurface, resolver: TypeResolver, clipboard: Clipboard,
                 messages: MessageSink, settings: Optional[ContractResolverSettings] = None,
                 butler: Optional[JSONButler] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(editor, clipboard, messages, butler, logger)
        self.resolver = resolver
        self.settings = settings or ContractResolverSettings()

    def _execute(self) -> bool:
        qualified_name = self.editor.get_selected_text().strip()
        if not qualified_name:
            self.messages.show_message(INVALID_ELEMENT_MESSAGE)
            return False

        handle = self.resolver.resolve_type(qualified_name)
        result = self.butler.serialize_type(handle, self.settings)

        self.clipboard.copy_to_clipboard(result.json_string)
        self.messages.show_message(SERIALIZED_MESSAGE)
        self.logger.info(f"Serialized text from {result.qualified_name} copied")
        return True


class ConvertPascalCaseCommand(ButlerCommand):
    """Convert the selected text into a PascalCase identifier."""

    def _execute(self) -> bool:
        selected = self.editor.get_selected_text()
        if not selected.strip():
            self.messages.show_message(EMPTY_SELECTION_MESSAGE)
            return False

        self.clipboard.copy_to_clipboard(self.butler.convert_to_pascal_case(selected))
        self.messages.show_message(CONVERTED_MESSAGE)
        return True
