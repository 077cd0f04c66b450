from typing import Any

import pytest


def build_sat_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "NumeroDocumento": "100",
        "SerieDocumento": "1",
        "DataEmissao": "2024-03-15",
        "CnpjOuCpfDoEmitente": "12.345.678/0001-95",
        "CnpjOuCpfDoDestinatario": "987.654.321-00",
        "UfDestinatario": "SP",
        "ModeloDocumento": "55",
        "TipoDocumento": "Nfe",
        "TipoDeOperacaoEntradaOuSaida": "S",
        "Situacao": "Autorizado",
        "ValorTotalNota": 1100.00,
        "ValorTotalICMS": 180.00,
        "ValorBaseCalculoICMS": 1000.00,
        "ValorIPI": 100.00,
        "ValorPis": 16.50,
        "ValorCofins": 76.00,
    }
    row.update(overrides)
    return row


def build_questor_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "Número": "100",
        "Série": "1",
        "Data Escrituração/Serviço": "15/03/2024",
        "CNPJ EMITENTE": "12345678000195",
        "CNPJ DESTINATARIO": "98765432100",
        "Estado": "SP",
        "Valor Total": 1000.00,
        "Valor ICMS": 180.00,
        "Base Cálculo ICMS": 1000.00,
        "Base Cálculo Substituição Tributária": 0,
        "Valor Substituição Tributária": 0,
        "Valor Frete": 0,
        "Valor Seguro": 0,
        "Valor Despesa Acessória": 0,
        "Valor Desconto": 0,
        "Valor IPI": 100.00,
        "Valor PIS": 16.50,
        "Valor COFINS": 76.00,
    }
    row.update(overrides)
    return row


@pytest.fixture
def sat_row():
    return build_sat_row


@pytest.fixture
def questor_row():
    return build_questor_row
