"""Invoice domain errors

Raised by the invoicing core when a status change or an item edit is not
allowed. Use cases convert them into libs.result.Error with the same code.
"""


class InvoiceDomainError(Exception):
    code = "INVOICE_DOMAIN_ERROR"


class InvalidTransition(InvoiceDomainError):
    """Requested status is not reachable from the current status"""

    code = "INVALID_TRANSITION"

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change invoice status from '{_value(current)}' to '{_value(requested)}'"
        )


class MutationAfterFreeze(InvoiceDomainError):
    """Line items were edited on an invoice that is no longer a draft"""

    code = "INVOICE_FROZEN"

    def __init__(self, status):
        self.status = status
        super().__init__(
            f"Items of an invoice in status '{_value(status)}' cannot be modified"
        )


def _value(status) -> str:
    return getattr(status, "value", status)
