import httpx

from agendatop.services.postal import lookup_cep

VIACEP_PAULISTA = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "complemento": "de 612 a 1510 - lado par",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_lookup_cep_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=VIACEP_PAULISTA)

    data = lookup_cep("01310-100", client=_client(handler))
    assert seen == ["/ws/01310100/json/"]
    assert data == {
        "cep": "01310-100",
        "street": "Avenida Paulista",
        "district": "Bela Vista",
        "city": "São Paulo",
        "state": "SP",
    }


def test_lookup_cep_not_found():
    data = lookup_cep("99999999", client=_client(lambda r: httpx.Response(200, json={"erro": True})))
    assert data is None


def test_lookup_cep_http_error():
    assert lookup_cep("01310100", client=_client(lambda r: httpx.Response(500))) is None

    def boom(request):
        raise httpx.ConnectError("sem rede", request=request)

    assert lookup_cep("01310100", client=_client(boom)) is None


def test_lookup_cep_malformed_skips_request():
    def handler(request):
        raise AssertionError("não deveria chamar a API")

    assert lookup_cep("123", client=_client(handler)) is None
