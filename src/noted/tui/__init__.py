"""Terminal UI: directory picker, vault flow and the loop that drives them."""

from noted.tui.directory_picker import DirectoryPicker, PickerResult
from noted.tui.vault_flow import FlowOutcome, FlowState, OutcomeKind, VaultFlow

__all__ = [
    "DirectoryPicker",
    "FlowOutcome",
    "FlowState",
    "OutcomeKind",
    "PickerResult",
    "VaultFlow",
]
