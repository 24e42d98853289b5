"""
活动API路由 - 活动 CRUD、审核与 RSVP
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status

from application.services.event_service import EventApplicationService
from application.dto import (
    EventCreateDTO,
    EventUpdateDTO,
    EventResponseDTO,
    RSVPRequestDTO,
    RSVPResponseDTO,
)
from core.response import success_response, Response as ApiResponse
from domain.user.entity import User
from api.dependencies import get_current_user, get_event_service

router = APIRouter(
    prefix="/events",
    tags=["活动管理"]
)


@router.get("", summary="已审核活动列表", response_model=ApiResponse[List[EventResponseDTO]])
async def list_events(service: EventApplicationService = Depends(get_event_service)):
    """按日期升序返回已审核的活动，包含组织者与 RSVP"""
    events = await service.list_events()
    return success_response(data=events)


@router.get("/{event_id}", summary="活动详情", response_model=ApiResponse[EventResponseDTO])
async def get_event(
    event_id: int = Path(..., ge=1),
    service: EventApplicationService = Depends(get_event_service),
):
    return success_response(data=await service.get_event(event_id))


@router.post(
    "",
    summary="创建活动",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[EventResponseDTO],
)
async def create_event(
    data: EventCreateDTO,
    current_user: User = Depends(get_current_user),
    service: EventApplicationService = Depends(get_event_service),
):
    """
    创建活动（ORGANIZER / ADMIN）

    管理员创建的活动自动审核通过，其余需等待审核。
    """
    event = await service.create_event(current_user, data)
    return success_response(data=event, message="Event created successfully")


@router.put("/{event_id}", summary="更新活动", response_model=ApiResponse[EventResponseDTO])
async def update_event(
    data: EventUpdateDTO,
    event_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    service: EventApplicationService = Depends(get_event_service),
):
    event = await service.update_event(current_user, event_id, data)
    return success_response(data=event, message="Event updated successfully")


@router.delete("/{event_id}", summary="删除活动", response_model=ApiResponse[None])
async def delete_event(
    event_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    service: EventApplicationService = Depends(get_event_service),
):
    await service.delete_event(current_user, event_id)
    return success_response(message="Event deleted successfully")


@router.post("/{event_id}/approve", summary="审核活动", response_model=ApiResponse[EventResponseDTO])
async def approve_event(
    event_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    service: EventApplicationService = Depends(get_event_service),
):
    event = await service.approve_event(current_user, event_id)
    return success_response(data=event, message="Event approved successfully")


@router.post("/{event_id}/rsvp", summary="回复活动", response_model=ApiResponse[RSVPResponseDTO])
async def rsvp(
    data: RSVPRequestDTO,
    event_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    service: EventApplicationService = Depends(get_event_service),
):
    result = await service.rsvp(current_user, event_id, data)
    return success_response(data=result, message="RSVP updated successfully")
