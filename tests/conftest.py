import pytest

from tests.accessories import access_server as access_server_


@pytest.fixture(params=[
    pytest.param(('asyncio', {}), id='asyncio'),
    pytest.param(('trio', {}), id='trio'),
])
def anyio_backend(request):
    return request.param


@pytest.fixture(params=['127.0.0.1'])
def bind_host(request):
    """ Localhost bind address. """
    return request.param


@pytest.fixture
def server(bind_host):
    """
    Returns an async context manager that runs a fake access server and
    yields its state.
    """
    def mgr(**kw):
        return access_server_(host=bind_host, **kw)
    return mgr
