from fastapi import APIRouter, Depends, HTTPException, Query

from barberbot.api.v1.schemas import CreateReservationSchema, ReservationSchema
from barberbot.application.exceptions import RepositoryError, ReservationConflictError
from barberbot.application.ports.reservation_repository import ReservationRepositoryPort
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.utils.normalizers import normalize_date, normalize_time
from barberbot.domain.entities.reservation import Reservation
from barberbot.domain.entities.service_catalog import get_service
from barberbot.wiring.dependencies import get_cancellation_use_case, get_reservation_repository

router = APIRouter()


@router.get("", response_model=list[ReservationSchema])
async def list_reservations(
    repository: ReservationRepositoryPort = Depends(get_reservation_repository),
):
    try:
        reservations = await repository.list_all()
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [ReservationSchema.from_entity(r) for r in reservations]


@router.post("", response_model=ReservationSchema, status_code=201)
async def create_reservation(
    req: CreateReservationSchema,
    repository: ReservationRepositoryPort = Depends(get_reservation_repository),
):
    reservation = Reservation(
        name=req.name.strip(),
        phone=req.phone.strip(),
        service=req.service,
        provider_id=req.provider,
        date=req.date,
        time=req.time,
        price=get_service(req.service).price,
    )
    try:
        await repository.create(reservation)
    except ReservationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ReservationSchema.from_entity(reservation)


@router.delete("", response_model=ReservationSchema)
async def cancel_reservation(
    name: str = Query(..., min_length=1),
    date: str = Query(...),
    time: str = Query(...),
    uc: CancellationUseCase = Depends(get_cancellation_use_case),
):
    canonical_date = normalize_date(date)
    canonical_time = normalize_time(time)
    if canonical_date is None or canonical_time is None:
        raise HTTPException(status_code=422, detail="date must be DD/MM/YYYY and time a bookable slot")

    try:
        deleted = await uc.cancel(name.strip(), canonical_date, canonical_time)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if deleted is None:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return ReservationSchema.from_entity(deleted)
