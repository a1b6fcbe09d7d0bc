"""Exceptions raised by the drafting pipeline and its collaborators."""


class PriorAuthError(Exception):
    """Base class for all prior-authorization errors."""


class UnknownPayer(PriorAuthError):
    def __init__(self, payer: str):
        self.payer = payer
        super().__init__(f"No rules found for payer: {payer}")


class UnknownProcedure(PriorAuthError):
    def __init__(self, payer: str, procedure_code: str):
        self.payer = payer
        self.procedure_code = procedure_code
        super().__init__(f"No rules found for procedure: {procedure_code} (payer: {payer})")


class MalformedInput(PriorAuthError):
    """Clinical note or a required top-level field is missing."""


class ServiceUnavailable(PriorAuthError):
    """An external text-producing service (summarization) could not be used."""


class InvalidRuleSet(PriorAuthError):
    """A rule document failed schema validation and was not applied."""


class RequestNotFound(PriorAuthError):
    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Request {request_id} not found")


class InvalidStatusTransition(PriorAuthError):
    def __init__(self, request_id: str, old_status: str, new_status: str):
        self.request_id = request_id
        self.old_status = old_status
        self.new_status = new_status
        super().__init__(f"Request {request_id} cannot move from {old_status} to {new_status}")
