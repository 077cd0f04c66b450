"""Streamlit front-end for the SAT x Questor validation pipeline."""
from __future__ import annotations

import logging
from io import BytesIO

import pandas as pd
import streamlit as st

from invoice_checker import (
    InvoiceValidationContext,
    InvoiceValidator,
    QuestorSpreadsheetRepository,
    SatSpreadsheetRepository,
    ValidateInvoicesUseCase,
    get_rule_set,
)
from invoice_checker.config import SETTINGS
from invoice_checker.domain.results import ValidationResult
from invoice_checker.domain.rules import RULE_SETS
from invoice_checker.presentation.diff_report import (
    issues_to_rows,
    render_csv,
    render_xlsx,
    report_filename,
)
from invoice_checker.presentation.filters import IssueFilter, filter_issues

logging.basicConfig(level=SETTINGS.log_level)
logger = logging.getLogger("invoice_checker.app")

st.set_page_config(page_title="Validador SAT x Questor", layout="wide")
st.title("Validação SAT x Questor")

UPLOAD_TYPES = ["xlsx", "xls", "csv"]
STATUS_OPTIONS = {"Todos": "all", "Sem problemas": "ok", "Alertas": "warning", "Erros": "error"}


def run_validation(rule_set_name: str, sat_file, questor_file) -> ValidationResult:
    context = InvoiceValidationContext(
        sat_repository=SatSpreadsheetRepository(BytesIO(sat_file.getvalue()), filename=sat_file.name),
        questor_repository=QuestorSpreadsheetRepository(BytesIO(questor_file.getvalue()), filename=questor_file.name),
        validator=InvoiceValidator(get_rule_set(rule_set_name)),
    )
    return ValidateInvoicesUseCase(context).execute().result


if "view" not in st.session_state:
    st.session_state["view"] = "compare"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "compare":
    rule_set_name = st.radio(
        "Tipo de validação",
        options=list(RULE_SETS),
        format_func=lambda name: RULE_SETS[name].title,
        horizontal=True,
    )
    col1, col2 = st.columns(2)
    with col1:
        sat_file = st.file_uploader("Planilha SAT", type=UPLOAD_TYPES)
    with col2:
        questor_file = st.file_uploader("Planilha Questor", type=UPLOAD_TYPES)

    run_btn = st.button("Validar", disabled=not (sat_file and questor_file))
    if run_btn and sat_file and questor_file:
        try:
            with st.spinner("Validando..."):
                result = run_validation(rule_set_name, sat_file, questor_file)
        except (ValueError, TypeError, OSError):
            logger.exception("Validation failed")
            st.error("Não foi possível processar as planilhas. Verifique os arquivos e tente novamente.")
        else:
            st.session_state["result"] = result
            st.session_state["view"] = "results"
            st.rerun()
else:
    back_clicked = st.button("← Voltar", key="back_to_compare")
    if back_clicked:
        st.session_state["view"] = "compare"
        st.session_state["result"] = None
        st.rerun()

    result: ValidationResult | None = st.session_state.get("result")
    if not result:
        st.info("Nenhum resultado disponível. Envie as planilhas e execute a validação.")
    else:
        st.subheader(f"Resumo - {get_rule_set(result.rule_set).title}")
        cols = st.columns(4)
        cols[0].metric("Notas analisadas", result.total_records)
        cols[1].metric("Notas validadas", result.matched_records)
        cols[2].metric("Percentual de sucesso", f"{result.success_rate}%")
        cols[3].metric("Problemas", len(result.issues))

        with st.expander("Filtros"):
            fcol1, fcol2, fcol3, fcol4 = st.columns(4)
            start_date = fcol1.date_input("Data inicial", value=None)
            end_date = fcol2.date_input("Data final", value=None)
            cnpj = fcol3.text_input("Documento")
            status_label = fcol4.selectbox("Status", list(STATUS_OPTIONS))
        issue_filter = IssueFilter(
            start_date=start_date,
            end_date=end_date,
            cnpj=cnpj,
            status=STATUS_OPTIONS[status_label],
        )
        shown = filter_issues(result.issues, issue_filter)

        if not result.issues:
            st.success("Nenhuma divergência encontrada.")
        st.caption(f"Exibindo {len(shown)} de {len(result.issues)} problemas")
        st.dataframe(pd.DataFrame(issues_to_rows(shown)), use_container_width=True, hide_index=True)

        # Downloads always carry the full report, whatever the filters show.
        st.download_button(
            "Baixar relatório Excel",
            data=render_xlsx(result),
            file_name=report_filename(),
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        st.download_button(
            "Baixar divergências CSV",
            data=render_csv(result.issues),
            file_name="divergencias-sat-questor.csv",
            mime="text/csv",
        )
