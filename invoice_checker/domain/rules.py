"""Declarative field tables and rule-set variants for the reconciliation engine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# SAT export columns.
SAT_NUMBER = "NumeroDocumento"
SAT_SERIES = "SerieDocumento"
SAT_ISSUE_DATE = "DataEmissao"
SAT_ISSUER_ID = "CnpjOuCpfDoEmitente"
SAT_RECIPIENT_ID = "CnpjOuCpfDoDestinatario"
SAT_RECIPIENT_UF = "UfDestinatario"
SAT_MODEL = "ModeloDocumento"
SAT_DOCUMENT_TYPE = "TipoDocumento"
SAT_OPERATION = "TipoDeOperacaoEntradaOuSaida"
SAT_STATUS = "Situacao"
SAT_IPI_DEVOLV_A58 = "ValorTotalIpiDevolvA58"

SAT_MONETARY_FIELDS: tuple[str, ...] = (
    "ValorTotalNota",
    "ValorTotalICMS",
    "ValorBaseCalculoICMS",
    "ValorBaseCalculoICMSST",
    "ValorTotalICMSST",
    "ValorFrete",
    "ValorSeguro",
    "ValorDespesaAcessoria",
    "ValorDesconto",
    "ValorIPI",
    SAT_IPI_DEVOLV_A58,
    "ValorPis",
    "ValorCofins",
)

# Questor export columns.
QUESTOR_NUMBER = "Número"
QUESTOR_SERIES = "Série"
QUESTOR_TOTAL = "Valor Total"
QUESTOR_IPI = "Valor IPI"

QUESTOR_MONETARY_FIELDS: tuple[str, ...] = (
    QUESTOR_TOTAL,
    "Valor ICMS",
    "Base Cálculo ICMS",
    "Base Cálculo Substituição Tributária",
    "Valor Substituição Tributária",
    "Valor Frete",
    "Valor Seguro",
    "Valor Despesa Acessória",
    "Valor Desconto",
    QUESTOR_IPI,
    "Valor PIS",
    "Valor COFINS",
)

Comparison = Literal["date", "document", "literal"]


@dataclass(frozen=True)
class IdentityFieldRule:
    sat_field: str
    questor_field: str
    label: str
    comparison: Comparison


@dataclass(frozen=True)
class ValueFieldRule:
    """SAT aggregated field compared against the sum of one or more Questor fields."""

    sat_field: str
    questor_fields: tuple[str, ...]
    label: str


IDENTITY_FIELD_RULES: tuple[IdentityFieldRule, ...] = (
    IdentityFieldRule(SAT_ISSUE_DATE, "Data Escrituração/Serviço", "Data", "date"),
    IdentityFieldRule(SAT_ISSUER_ID, "CNPJ EMITENTE", "CNPJ Emitente", "document"),
    IdentityFieldRule(SAT_RECIPIENT_ID, "CNPJ DESTINATARIO", "CNPJ Destinatário", "document"),
    IdentityFieldRule(SAT_RECIPIENT_UF, "Estado", "UF Destinatário", "literal"),
)

VALUE_FIELD_RULES: tuple[ValueFieldRule, ...] = (
    ValueFieldRule("ValorTotalNota", (QUESTOR_TOTAL, QUESTOR_IPI), "Valor Total Nota"),
    ValueFieldRule("ValorTotalICMS", ("Valor ICMS",), "Valor ICMS"),
    ValueFieldRule("ValorBaseCalculoICMS", ("Base Cálculo ICMS",), "Base Cálculo ICMS"),
    ValueFieldRule("ValorBaseCalculoICMSST", ("Base Cálculo Substituição Tributária",), "Base Cálculo ST"),
    ValueFieldRule("ValorTotalICMSST", ("Valor Substituição Tributária",), "Valor ICMS ST"),
    ValueFieldRule("ValorFrete", ("Valor Frete",), "Valor Frete"),
    ValueFieldRule("ValorSeguro", ("Valor Seguro",), "Valor Seguro"),
    ValueFieldRule("ValorDespesaAcessoria", ("Valor Despesa Acessória",), "Valor Despesa Acessória"),
    ValueFieldRule("ValorDesconto", ("Valor Desconto",), "Valor Desconto"),
    ValueFieldRule("ValorIPI", (QUESTOR_IPI,), "Valor IPI"),
    ValueFieldRule("ValorPis", ("Valor PIS",), "Valor PIS"),
    ValueFieldRule("ValorCofins", ("Valor COFINS",), "Valor COFINS"),
)

# Issue labels and messages shared by both variants.
LABEL_BASIC_DATA = "Dados Básicos"
LABEL_DOCUMENT = "Documento"
LABEL_IPI_COMPLEMENT = "IPI Complementar"
MESSAGE_BASIC_DATA = "Dados básicos inválidos (Modelo, Tipo ou Situação)"
MESSAGE_NOT_FOUND = "Nota fiscal não encontrada na planilha Questor"
MESSAGE_FIELD_MISMATCH = "Divergência entre SAT e Questor"
MESSAGE_IPI_COMPLEMENT = "VERIFICAR VALOR DE IPI EM COMPLEMENTARES"


@dataclass(frozen=True)
class RuleSet:
    """Variant-specific wording; the comparison logic is shared."""

    name: str
    title: str
    inbound_operation_message: str
    cancelled_message: str


EMITIDAS = RuleSet(
    name="emitidas",
    title="SAT Emitidas x Questor Saídas",
    inbound_operation_message="NOTA FISCAL DE ENTRADA - VERIFICAR NO MOVIMENTO DE ENTRADAS",
    cancelled_message="NOTA FISCAL CANCELADA",
)

DESTINADAS = RuleSet(
    name="destinadas",
    title="SAT Destinadas x Questor Entradas",
    inbound_operation_message="NOTA FISCAL ENTRADA FORNECEDOR NÃO DEVE SER ESCRITURADA - VERIFICAR",
    cancelled_message="NOTA CANCELADA, NÃO DEVE SER ESCRITURADA",
)

RULE_SETS: dict[str, RuleSet] = {rule_set.name: rule_set for rule_set in (EMITIDAS, DESTINADAS)}


def get_rule_set(name: str) -> RuleSet:
    try:
        return RULE_SETS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown rule set {name!r}; expected one of {sorted(RULE_SETS)}") from None
