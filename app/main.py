from __future__ import annotations

import base64
import logging
import tempfile
from pathlib import Path

import streamlit as st

from pagemerge.adapters.pymupdf_adapter import PyMuPdfAdapter
from pagemerge.domain.errors import PdfMergeError
from pagemerge.domain.models import ClientResponse, Disposition, MetadataField, Orientation
from pagemerge.infrastructure.config import AppConfig
from pagemerge.infrastructure.logging_setup import configure_logging
from pagemerge.services.merge_session import MergeSession

logger = logging.getLogger(__name__)

ORIENTATION_CHOICES: dict[str, Orientation | None] = {
    "Auto (per page)": None,
    "Portrait": Orientation.PORTRAIT,
    "Landscape": Orientation.LANDSCAPE,
}


def _init_state() -> None:
    st.session_state.setdefault("responses", {})
    st.session_state.setdefault("merge_summary", "")


def _validate_upload_limits(config: AppConfig, files: list[tuple[str, bytes]]) -> None:
    total = sum(len(content) for _, content in files)
    if total > config.max_batch_size_bytes:
        raise PdfMergeError(f"Batch exceeds {config.max_batch_size_mb} MB limit.")
    for name, content in files:
        if len(content) > config.max_pdf_size_bytes:
            raise PdfMergeError(f"{name} exceeds {config.max_pdf_size_mb} MB limit.")
        if not name.lower().endswith(".pdf"):
            raise PdfMergeError(f"{name} is not a PDF file.")


def _inline_pdf_html(content: bytes) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return (
        f"<iframe src='data:application/pdf;base64,{encoded}' "
        "style='width:100%;height:720px;border:1px solid rgba(120,120,120,0.35);"
        "border-radius:10px;'></iframe>"
    )


def _run_merge(
    files: list[tuple[str, bytes]],
    selections: list[tuple[str, Orientation | None]],
    orientation: Orientation | None,
    duplex: bool,
    metadata: dict[str, str],
    output_name: str,
) -> dict[Disposition, ClientResponse]:
    responses: dict[Disposition, ClientResponse] = {}

    def collect(response: ClientResponse) -> None:
        responses[response.disposition] = response

    with tempfile.TemporaryDirectory(prefix="pagemerge_") as workdir:
        with MergeSession(PyMuPdfAdapter(client_stream=collect)) as session:
            for index, ((name, content), (pages, override)) in enumerate(zip(files, selections)):
                path = Path(workdir) / f"{index:03d}_{Path(name).name}"
                path.write_bytes(content)
                session.add_source(path, pages or "all", override)

            if duplex:
                result = session.duplex_merge(orientation, metadata)
            else:
                result = session.merge(orientation, metadata)

            session.save(output_name, "download")
            session.save(output_name, "browser")

    st.session_state.merge_summary = (
        f"Merged {result.page_count} page(s) from {len(files)} PDF(s), "
        f"{result.blank_pages} blank padding page(s)."
    )
    return responses


def _merge_tab(config: AppConfig) -> None:
    st.subheader("Merge PDFs", anchor=False)
    st.caption("Files are merged in upload order. Pages use formats like 1,3,6,12-16.")

    uploaded = st.file_uploader(
        (
            "Load one or more PDFs "
            f"(max {config.max_pdf_size_mb} MB each, "
            f"{config.max_batch_size_mb} MB total)"
        ),
        type=["pdf"],
        accept_multiple_files=True,
        key="merge_upload",
    )
    files = [(item.name, item.getvalue()) for item in uploaded] if uploaded else []
    if not files:
        st.info("No PDFs loaded yet.")
        return

    selections: list[tuple[str, Orientation | None]] = []
    for index, (name, _) in enumerate(files):
        name_col, pages_col, orientation_col = st.columns([3, 2, 2])
        name_col.markdown(f"**{index + 1}. {name}**")
        pages = pages_col.text_input(
            "Pages", value="all", key=f"pages_{index}_{name}", label_visibility="collapsed"
        )
        override = orientation_col.selectbox(
            "Orientation",
            options=list(ORIENTATION_CHOICES),
            key=f"orientation_{index}_{name}",
            label_visibility="collapsed",
        )
        selections.append((pages, ORIENTATION_CHOICES[override]))

    st.divider()
    global_col, duplex_col = st.columns(2)
    global_choice = global_col.radio(
        "Global orientation", options=list(ORIENTATION_CHOICES), horizontal=True
    )
    duplex = duplex_col.checkbox(
        "Duplex (start every file on a front side)", value=False, key="duplex"
    )

    with st.expander("Document metadata"):
        metadata = {
            field.value: st.text_input(field.value.title(), key=f"meta_{field.value}")
            for field in MetadataField
        }
    metadata = {key: value for key, value in metadata.items() if value.strip()}
    output_name = st.text_input("Output file name", value=config.output_name)

    if st.button("Merge", type="primary"):
        try:
            _validate_upload_limits(config, files)
            st.session_state.responses = _run_merge(
                files,
                selections,
                ORIENTATION_CHOICES[global_choice],
                duplex,
                metadata,
                output_name or config.output_name,
            )
        except (PdfMergeError, ValueError) as exc:
            logger.warning("Merge failed: %s", exc)
            st.session_state.responses = {}
            st.error(str(exc))

    responses: dict[Disposition, ClientResponse] = st.session_state.responses
    if not responses:
        return

    st.success(st.session_state.merge_summary)
    attachment = responses[Disposition.ATTACHMENT]
    st.download_button(
        "Download merged PDF",
        data=attachment.content,
        file_name=attachment.file_name,
        mime=attachment.headers["Content-Type"],
        type="primary",
        use_container_width=True,
    )
    if st.checkbox("Show in browser", value=False, key="show_inline"):
        st.markdown(_inline_pdf_html(responses[Disposition.INLINE].content), unsafe_allow_html=True)


def main() -> None:
    config = AppConfig()
    configure_logging(config.log_level)
    st.set_page_config(page_title="PDF Page Merger", layout="wide")
    st.title("PDF Page Merger", anchor=False)

    _init_state()
    _merge_tab(config)


if __name__ == "__main__":
    main()
