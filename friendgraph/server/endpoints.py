from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import HTMLResponse

from .config import get_settings
from .db import Database, is_initialized
from .errors import (
    FriendGraphError, ValidationError, DuplicateUsernameError, NotFoundError,
    SelfLinkError, AlreadyLinkedError, NotLinkedError, HasFriendsError, StoreUnavailableError
)
from .models import GraphView, LinkRequest, User, UserCreate, UserUpdate
from .services import UserService

router = APIRouter()
api = APIRouter(prefix="/api")

# 业务错误 -> HTTP 状态码
ERROR_STATUS = {
    ValidationError: 400,
    SelfLinkError: 400,
    NotLinkedError: 400,
    NotFoundError: 404,
    DuplicateUsernameError: 409,
    AlreadyLinkedError: 409,
    HasFriendsError: 409,
    StoreUnavailableError: 503,
}


def to_http_error(error: FriendGraphError) -> HTTPException:
    status_code = 500
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message}
    )


@router.get("/", response_class=HTMLResponse)
async def root():
    """
    根路径 - 服务状态检查

    返回:
    - 200: 服务运行状态（HTML）
    """
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>FriendGraph Server</title>
    </head>
    <body>
        <p>FriendGraph is Running, see <a href="/docs">API docs →</a></p>
    </body>
    </html>
    """


async def get_db():
    """获取数据库连接"""
    if is_initialized():
        db = Database()
    else:
        settings = get_settings()
        db = Database(settings.sqlite_path, settings.busy_timeout)
    await db.connect()
    try:
        yield db
    finally:
        await db.disconnect()


def get_user_service(
        db: Database = Depends(get_db)
) -> UserService:
    return UserService(db)


@api.get("/users", response_model=List[User])
async def list_users(service: UserService = Depends(get_user_service)):
    """
    获取全部用户

    HTTP调用方式:
    GET /api/users

    返回:
    - 200: User列表，包含好友 id 和 popularity_score
    """
    try:
        return await service.list_users()
    except FriendGraphError as e:
        raise to_http_error(e)


@api.get("/users/{user_id}", response_model=User)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    """
    根据ID获取用户信息

    返回:
    - 200: User对象
    - 404: 用户不存在
    """
    try:
        return await service.get_user(user_id)
    except FriendGraphError as e:
        raise to_http_error(e)


@api.post("/users", response_model=User, status_code=201)
async def create_user(user_data: UserCreate, service: UserService = Depends(get_user_service)):
    """
    创建用户

    HTTP调用方式:
    POST /api/users
    Content-Type: application/json
    Body: {
        "username": "alice",
        "age": 25,
        "hobbies": ["reading", "gaming"]
    }

    返回:
    - 201: 新建的User对象
    - 409: 用户名已存在
    - 422: 请求参数验证失败
    """
    try:
        return await service.create_user(user_data.username, user_data.age, user_data.hobbies)
    except FriendGraphError as e:
        raise to_http_error(e)


@api.put("/users/{user_id}", response_model=User)
async def update_user(user_id: str, user_data: UserUpdate,
                      service: UserService = Depends(get_user_service)):
    """
    更新用户资料，未提供的字段保持不变

    返回:
    - 200: 更新后的User对象
    - 404: 用户不存在
    - 409: 新用户名已被占用
    - 422: 请求参数验证失败
    """
    try:
        return await service.update_user(
            user_id,
            username=user_data.username,
            age=user_data.age,
            hobbies=user_data.hobbies,
        )
    except FriendGraphError as e:
        raise to_http_error(e)


@api.delete("/users/{user_id}", status_code=204)
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    """
    删除用户，仍有好友时拒绝

    返回:
    - 204: 删除成功
    - 404: 用户不存在
    - 409: 用户仍有好友
    """
    try:
        await service.delete_user(user_id)
    except FriendGraphError as e:
        raise to_http_error(e)
    return Response(status_code=204)


@api.post("/users/{user_id}/link", response_model=User)
async def link_users(user_id: str, request: LinkRequest,
                     service: UserService = Depends(get_user_service)):
    """
    建立好友关系（双向）

    HTTP调用方式:
    POST /api/users/{user_id}/link
    Body: {"friend_id": "对方的ID"}

    返回:
    - 200: 发起方的User对象
    - 400: 不能和自己成为好友
    - 404: 任一用户不存在
    - 409: 已经是好友
    """
    try:
        return await service.link_users(user_id, request.friend_id)
    except FriendGraphError as e:
        raise to_http_error(e)


@api.delete("/users/{user_id}/unlink", response_model=User)
async def unlink_users(user_id: str, request: LinkRequest,
                       service: UserService = Depends(get_user_service)):
    """
    解除好友关系（双向）

    返回:
    - 200: 发起方的User对象
    - 400: 两人不是好友
    - 404: 任一用户不存在
    """
    try:
        return await service.unlink_users(user_id, request.friend_id)
    except FriendGraphError as e:
        raise to_http_error(e)


@api.get("/graph", response_model=GraphView)
async def graph(service: UserService = Depends(get_user_service)):
    """
    图数据：全部用户 + 去重后的好友边

    返回:
    - 200: {"users": [...], "relationships": [{"user_id1": ..., "user_id2": ...}]}
    """
    try:
        return await service.graph_view()
    except FriendGraphError as e:
        raise to_http_error(e)


@api.get("/hobbies", response_model=List[str])
async def list_hobbies(service: UserService = Depends(get_user_service)):
    """所有已出现的爱好，去重排序"""
    try:
        return await service.list_hobbies()
    except FriendGraphError as e:
        raise to_http_error(e)


router.include_router(api)
