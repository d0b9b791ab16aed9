import pytest

from odooprovisioner.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("step_failed", index=10, label="Clone Custom Odoo Addons", last_completed=9)

    assert "Step 10 (Clone Custom Odoo Addons) failed. Last completed step: 9." in message
    assert "Suggested action:" in message
    assert "resume from step 10" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError, match="Unknown error catalog key"):
        actionable_error("does_not_exist")
