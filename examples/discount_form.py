"""
Order discount form driven by FormState.

Simulates a widget layer pushing edits while the order query refreshes in
the background, then submits the reconciled data.
"""

import logging

from formstate import ChangeEvent, FormState

logger = logging.getLogger(__name__)


def load_order(revision: int) -> dict:
    """Stand-in for an upstream query result that keeps changing."""
    return {
        "inputType": "",
        "discountValue": "",
        "note": f"revision {revision}",
        "channels": ["web"],
        "array": [
            {"key": "DISCOUNT_CODE4000", "value": "15"},
            {"key": "DISCOUNT_CODE4030", "value": "30"},
        ],
    }


def save(data: dict) -> None:
    logger.info(f"Submitting order: {data}")


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    form = FormState(load_order(1), save)
    form.on_state_changed(lambda: logger.info(f"changed={form.has_changed} data={form.data}"))

    with form.batch():
        form.change(ChangeEvent.of("inputType", "DISCOUNT_CODE4030"))
        form.toggle_value(ChangeEvent.of("channels", "pos"))

    # Upstream bumps the note; the user's discount selection survives
    form.refresh(load_order(2))
    form.submit()


if __name__ == "__main__":
    main()
