# -*- coding: utf-8 -*-
"""English translations."""

EN_TRANSLATIONS = {
    # Dialogs
    "dialog.error": "Error",
    "dialog.warning": "Warning",
    "dialog.success": "Success",

    # Buttons
    "button.next": "Next",
    "button.back": "Back",
    "button.submit": "Submit",
    "button.retry": "Retry",
    "button.cancel": "Cancel",

    # Wizard
    "wizard.step_of": "Step {current} of {total}",
    "wizard.submitting": "Submitting...",
    "wizard.retrying": "Submission failed. Retrying in {seconds}s (attempt {attempt} of {max_attempts})...",
    "wizard.succeeded": "Submitted successfully",
    "wizard.cancelled": "The form was closed before it finished",
    "wizard.step_blocked": "Please correct the highlighted fields before continuing",
    "wizard.step_not_visited": "That step cannot be opened yet",
    "wizard.busy": "Please wait for the current operation to finish",

    # Submission errors
    "error.submit.conflict": "This submission conflicts with an existing record.",
    "error.submit.rejected": "The submission was rejected:\n{details}",
    "error.submit.rejected_generic": "The submission was rejected. Please review your answers.",
    "error.submit.unauthorized": "You are not authorized to submit this form. Please sign in again.",
    "error.submit.timeout": "The server took too long to respond.",
    "error.submit.unavailable": "The service is temporarily unavailable.",
    "error.submit.retries_exhausted": "{reason}\nGave up after {attempts} attempts. You can try again.",
    "error.submit.unknown": "An unexpected error occurred. Please try again.",

    # Validation Messages
    "validation.field_required": "Field '{field}' is required",
    "validation.invalid_format": "Field '{field}' has invalid format",
    "validation.check_data": "Please check the entered data",
}
