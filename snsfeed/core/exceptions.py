# domain exceptions
from typing import Optional


# ---------- base categories ----------

class NotFoundError(Exception):
    """A referenced entity does not exist (or is soft-deleted)."""

    entity = "entity"

    def __init__(self, entity_id: Optional[int] = None, message: Optional[str] = None):
        self.entity_id = entity_id
        if message:
            self.message = message
        elif entity_id is not None:
            self.message = f"{self.entity} {entity_id} not found"
        else:
            self.message = f"{self.entity} not found"
        super().__init__(self.message)


class AlreadyExistsError(Exception):
    """Duplicate add of a join row (like / follow)."""

    def __init__(self, message: str = "already exists"):
        self.message = message
        super().__init__(message)


class AlreadyRemovedError(Exception):
    """Redundant remove of a join row that is not there."""

    def __init__(self, message: str = "already removed"):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(Exception):
    def __init__(self, message: str = "invalid argument"):
        self.message = message
        super().__init__(message)


class ConflictError(Exception):
    def __init__(self, message: str = "conflict"):
        self.message = message
        super().__init__(message)


class ExternalServiceFailure(Exception):
    """
    The generation service was unreachable, answered with an error status,
    or returned a body we could not parse.

    Only raised inside post-commit side effects, never to a request caller.
    """

    def __init__(self, message: str = "external service failure", status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DataIntegrityWarning(UserWarning):
    """A denormalized counter was observed below zero. Logged, never raised."""


# ---------- not found ----------

class MemberNotFound(NotFoundError):
    entity = "member"


class PostNotFound(NotFoundError):
    entity = "post"


class CommentNotFound(NotFoundError):
    entity = "comment"


class RecommentNotFound(NotFoundError):
    entity = "recomment"


# ---------- likes ----------

class AlreadyLikedError(AlreadyExistsError):
    """The member already liked this target; blocks a second counter increment."""

    def __init__(self, member_id: int, target_type, target_id: int):
        self.member_id = member_id
        self.target_type = target_type
        self.target_id = target_id
        super().__init__(f"member {member_id} already liked {target_type} {target_id}")


class NotLikedError(AlreadyRemovedError):
    """Cancel on a target the member never liked (or already unliked)."""

    def __init__(self, member_id: int, target_type, target_id: int, message: Optional[str] = None):
        self.member_id = member_id
        self.target_type = target_type
        self.target_id = target_id
        if message is None:
            message = f"member {member_id} has not liked {target_type} {target_id}"
        super().__init__(message)


# ---------- follows ----------

class AlreadyFollowingError(AlreadyExistsError):
    def __init__(self, follower_id: Optional[int] = None, following_id: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            if follower_id is not None and following_id is not None:
                message = f"member {follower_id} is already following {following_id}"
            else:
                message = "already following this member"
        super().__init__(message)


class NotFollowingError(AlreadyRemovedError):
    def __init__(self, follower_id: Optional[int] = None, following_id: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            if follower_id is not None and following_id is not None:
                message = f"member {follower_id} is not following {following_id}"
            else:
                message = "not following this member"
        super().__init__(message)


class FollowYourselfError(ConflictError):
    def __init__(self, member_id: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            if member_id is not None:
                message = f"member {member_id} cannot follow themselves"
            else:
                message = "you cannot follow yourself"
        super().__init__(message)


# ---------- request arguments ----------

class InvalidLimitError(InvalidArgumentError):
    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"limit must be >= 1, got {limit}")


class InvalidCursorError(InvalidArgumentError):
    def __init__(self, cursor):
        self.cursor = cursor
        super().__init__(f"cursor must be a positive integer, got {cursor!r}")


class InvalidDeltaError(InvalidArgumentError):
    def __init__(self, delta):
        self.delta = delta
        super().__init__(f"delta must be +1 or -1, got {delta!r}")


class InvalidBoardType(InvalidArgumentError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"unknown board type: {value!r}")


# ---------- youtube summary ----------

class YoutubeUrlMissing(InvalidArgumentError):
    def __init__(self, post_id: int):
        super().__init__(f"post {post_id} has no youtube url")


class YoutubeSummaryInProgress(ConflictError):
    def __init__(self, post_id: int):
        super().__init__(f"summary of post {post_id} is still being generated")


class YoutubeSummaryFailed(ConflictError):
    def __init__(self, post_id: int):
        super().__init__(f"summary of post {post_id} could not be generated")


# ---------- misc ----------

class ForbiddenAction(Exception):
    """Member tried to modify content they do not own."""

    def __init__(self, message: str = "you are not allowed to do this"):
        self.message = message
        super().__init__(message)


class BotNotConfigured(NotFoundError):
    entity = "bot member"
