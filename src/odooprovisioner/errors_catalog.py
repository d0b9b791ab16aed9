"""Actionable error catalog for OdooProvisioner."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_input": {
        "what": "Missing required value for {field}.",
        "next": "Pass `--{option}`, set `{key}` in the config file, or answer the prompt.",
    },
    "invalid_username": {
        "what": "Invalid username '{username}'.",
        "next": "Use lowercase letters, digits, `_` or `-`, starting with a letter or `_` (max 32).",
    },
    "invalid_port": {
        "what": "Invalid port '{port}'.",
        "next": "Provide an integer between 1 and 65535.",
    },
    "root_required": {
        "what": "Provisioning must run as root.",
        "next": "Re-run with `sudo`, or use `--dry-run` to inspect the plan.",
    },
    "checkpoint_unwritable": {
        "what": "Could not write checkpoint file '{path}'.",
        "next": "Check free space and permissions of the checkpoint directory.",
    },
    "step_failed": {
        "what": "Step {index} ({label}) failed. Last completed step: {last_completed}.",
        "next": "Fix the cause above and re-run with the same username to resume from step {index}.",
    },
}


def actionable_error(code: str, **kwargs) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
