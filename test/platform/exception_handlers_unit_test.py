from fastapi import APIRouter
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest

from src.platform.app_factory import create_app
from src.platform.exception.exceptions import SeatUnavailableError


router = APIRouter()


class Payload(BaseModel):
    count: int


@router.post('/echo')
async def echo(payload: Payload) -> dict:
    return {'count': payload.count}


@router.get('/taken')
async def taken() -> dict:
    raise SeatUnavailableError('Seat not available', seat_id='A-1-1')


@router.get('/bad-value')
async def bad_value() -> dict:
    raise ValueError('count must be positive')


@router.get('/boom')
async def boom() -> dict:
    raise RuntimeError('kaboom')


@pytest.fixture
def client() -> TestClient:
    app = create_app(
        lifespan=None,
        routers=[router],
        title='test',
        description='test',
        service_name='test-service',
    )
    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    @pytest.mark.unit
    def test_custom_error_body(self, client):
        response = client.get('/taken')

        assert response.status_code == 409
        assert response.json() == {
            'error': 'seat_unavailable',
            'detail': 'Seat not available',
            'seat_id': 'A-1-1',
        }

    @pytest.mark.unit
    def test_request_validation_is_400(self, client):
        response = client.post('/echo', json={'count': 'many'})

        assert response.status_code == 400
        assert response.json()['error'] == 'validation_error'
        assert response.json()['errors']

    @pytest.mark.unit
    def test_value_error_is_400(self, client):
        response = client.get('/bad-value')

        assert response.status_code == 400
        assert response.json()['detail'] == 'count must be positive'

    @pytest.mark.unit
    def test_unhandled_error_is_500(self, client):
        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json()['error'] == 'internal_error'

    @pytest.mark.unit
    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
