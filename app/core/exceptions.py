# domain_exceptions.py
from typing import Optional, List


class BizError(Exception):
    """
    业务异常基类：
    - 所有业务层主动抛出的异常都继承它
    - message 为面向用户的提示文本
    """

    default_message = "Business error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BizError):
    """输入为空、过长过短、格式不合法等，在任何写操作之前抛出"""

    default_message = "Invalid input."


class NotFoundError(BizError):
    """引用的实体不存在"""

    default_message = "Resource not found."


class UserNotFound(NotFoundError):
    """
    在需要用户存在的场景下未找到对应用户时抛出：
    - 例如 关注目标 / 拉黑目标 / 回复对象 不存在
    """

    def __init__(self, user_id: Optional[str] = None, message: Optional[str] = None):
        if message is None and user_id is not None:
            message = f"User with id '{user_id}' not found."
        self.message = message or "User not found."
        super().__init__(self.message)


class BlogNotFound(NotFoundError):
    """找不到博客"""

    def __init__(self, bid: Optional[str] = None, message: Optional[str] = None):
        if message is None and bid is not None:
            message = f"blog {bid} not found"
        super().__init__(message or "blog not found")


class CommentNotFound(NotFoundError):
    """找不到评论"""

    def __init__(self, cid: Optional[str] = None, message: Optional[str] = None):
        if message is None and cid is not None:
            message = f"comment {cid} not found"
        super().__init__(message or "comment not found")


class NotificationNotFound(NotFoundError):
    """通知不存在，或不属于当前用户"""

    def __init__(self, nid: Optional[str] = None, message: Optional[str] = None):
        if message is None and nid is not None:
            message = f"notification {nid} not found"
        super().__init__(message or "notification not found")


class NotFollowingError(NotFoundError):
    """
    在取消关注时发现当前并未关注目标用户时抛出：
    - 用于区分“正常取消成功”和“本来就没关注”
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        target_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None and user_id is not None and target_id is not None:
            message = f"User '{user_id}' is not following '{target_id}'."
        super().__init__(message or "Not following this user.")


class NotBlockedError(NotFoundError):
    """取消拉黑时没有对应的拉黑记录"""

    def __init__(self, message: str = "User is not in your blacklist."):
        super().__init__(message)


class NotFavoritedError(NotFoundError):
    """取消收藏时没有对应的收藏记录"""

    def __init__(self, message: str = "Blog is not in your favorites."):
        super().__init__(message)


class PermissionDeniedError(BizError):
    """当前用户无权执行该操作（例如 非作者 / 非管理员 删除评论）"""

    default_message = "Permission denied."


class InactiveUserError(PermissionDeniedError):
    """账号已被停用"""

    default_message = "Account has been deactivated."


class SelfReferenceError(BizError):
    """对自己执行关注、拉黑等操作"""

    default_message = "Cannot perform this action on yourself."


class FollowYourselfError(SelfReferenceError):
    """
    尝试关注自己时抛出：
    - current_uid == target_uid
    """

    def __init__(self, user_id: Optional[str] = None, message: Optional[str] = None):
        if message is None and user_id is not None:
            message = f"User '{user_id}' cannot follow themselves."
        super().__init__(message or "You cannot follow yourself.")


class BlockYourselfError(SelfReferenceError):
    default_message = "You cannot block yourself."


class AlreadyExistsError(BizError):
    """唯一约束冲突：重复关注、重复拉黑、重复收藏等"""

    default_message = "Resource already exists."


class AlreadyFollowingError(AlreadyExistsError):
    """
    重复关注同一个用户时抛出：
    - 业务上不做“幂等返回”，而是明确提示已经关注
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        target_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None and user_id is not None and target_id is not None:
            message = f"User '{user_id}' is already following '{target_id}'."
        super().__init__(message or "Already following this user.")


class AlreadyBlockedError(AlreadyExistsError):
    default_message = "User is already in your blacklist."


class AlreadyFavoritedError(AlreadyExistsError):
    default_message = "Blog is already in your favorites."


class EmailAlreadyRegistered(AlreadyExistsError):
    def __init__(self, email: Optional[str] = None):
        super().__init__(f"email {email} is already registered" if email else "email is already registered")


class ModerationError(BizError):
    """内容未通过敏感词审核，found_words 记录命中的词"""

    def __init__(self, found_words: Optional[List[str]] = None, message: Optional[str] = None):
        self.found_words = list(found_words or [])
        super().__init__(message or "Content contains inappropriate words, please revise and retry.")


class AuthError(BizError):
    """未登录、token 无效或过期、账号密码错误"""

    default_message = "Authentication required."


class PasswordMismatchError(BizError):
    """旧密码校验失败"""

    default_message = "Old password does not match"


class UnexpectedError(BizError):
    """存储层 / 网络等意料之外的错误"""

    default_message = "Unexpected error, please try again later."
