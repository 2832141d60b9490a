from fastapi import HTTPException

from notevault.core.outcomes import Err, Ok, Reason, Result

# NotAuthorized shares 404 with NotFound so callers cannot tell which notes exist.
STATUS_BY_REASON = {
    Reason.NOT_FOUND: 404,
    Reason.NOT_AUTHORIZED: 404,
    Reason.UNKNOWN_USER: 404,
    Reason.OWNER_ONLY: 403,
    Reason.INVALID_PIN: 403,
    Reason.NOTE_LOCKED: 423,
    Reason.ALREADY_LOCKED: 409,
    Reason.NOT_LOCKED: 409,
    Reason.ALREADY_COLLABORATOR: 409,
    Reason.COLLABORATOR_LIMIT_EXCEEDED: 409,
    Reason.PIN_TOO_SHORT: 422,
    Reason.SELF_GRANT_NOT_ALLOWED: 400,
}

DEFAULT_DETAIL = {
    Reason.NOT_FOUND: "Note not found",
    Reason.OWNER_ONLY: "Only the note owner can do this",
    Reason.NOTE_LOCKED: "Note is locked. Unlock it first.",
}


def to_http_error(err: Err) -> HTTPException:
    # NotAuthorized is presented exactly like NotFound, whatever the core said
    reason = Reason.NOT_FOUND if err.reason is Reason.NOT_AUTHORIZED else err.reason
    if err.reason is Reason.NOT_AUTHORIZED:
        detail = DEFAULT_DETAIL[Reason.NOT_FOUND]
    else:
        detail = err.detail or DEFAULT_DETAIL.get(err.reason, err.reason.value)
    return HTTPException(
        status_code=STATUS_BY_REASON[err.reason],
        detail={"reason": reason.value, "message": detail},
    )


def unwrap(result: Result):
    """Return the success value or raise the mapped HTTPException."""
    if isinstance(result, Err):
        raise to_http_error(result)
    assert isinstance(result, Ok)
    return result.value
