import base64
import io
import os

import requests
import streamlit as st

API_BASE = os.getenv("XLIFF_SERVICE_API_BASE", os.getenv("API_BASE", "http://localhost:8080")).rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("XLIFF_SERVICE_UI_TIMEOUT", "600"))


def _reset_state():
    for key in ["result", "error"]:
        if key in st.session_state:
            del st.session_state[key]
    # Bump the uploader key to clear any previously uploaded file widget state
    if "upload_key" in st.session_state:
        st.session_state["upload_key"] += 1
    else:
        st.session_state["upload_key"] = 1


def _convert(uploaded_file: io.BytesIO, source: str, target: str) -> dict[str, object] | None:
    try:
        files = {"file": (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type or "application/octet-stream")}
        resp = requests.post(f"{API_BASE}/convert/{source.strip()}/{target.strip()}", files=files, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        st.session_state["error"] = f"Failed to connect to API: {e}"
        return None
    try:
        data = resp.json()
    except ValueError:
        st.session_state["error"] = f"Conversion failed: {resp.status_code} {resp.text}"
        return None
    if resp.status_code != 200:
        st.session_state["error"] = f"Conversion failed: {data.get('message', resp.text)}"
        return None
    return data


def _decode_artifact(result: dict[str, object]) -> bytes:
    return base64.b64decode(str(result.get("document_content", "")))


def main() -> None:
    st.set_page_config(page_title="XLIFF Conversion Service", page_icon="🌐", layout="centered")
    st.title("🌐 XLIFF Conversion Service")
    st.caption(f"API base: {API_BASE}")

    if st.button("Restart", type="secondary"):
        _reset_state()
        st.rerun()

    col1, col2 = st.columns([1, 1])
    with col1:
        source = st.text_input("Source language", value="en-US")
    with col2:
        target = st.text_input("Target language", value="fr-FR")

    # Use a dynamic key so that restarting bumps the key and clears the previous upload
    if "upload_key" not in st.session_state:
        st.session_state["upload_key"] = 0
    uploaded = st.file_uploader(
        "Upload a document (DOCX, PPTX, XLSX, PDF, HTML, Markdown, etc.)",
        key=f"uploader-{st.session_state['upload_key']}",
    )

    if uploaded and st.button("Convert to XLIFF", type="primary"):
        st.session_state.pop("error", None)
        with st.spinner("Converting..."):
            result = _convert(uploaded, source, target)
        if result:
            st.session_state["result"] = result
            st.toast("Conversion complete", icon="✅")

    if result := st.session_state.get("result"):
        xlf = _decode_artifact(result)
        st.success(f"Created {result.get('filename')} ({result.get('size_bytes')} bytes)")
        st.download_button(
            label="Download XLIFF",
            data=xlf,
            file_name=str(result.get("filename", "conversion.xlf")),
            mime="application/x-xliff+xml",
        )
        with st.expander("Preview"):
            st.code(xlf.decode("utf-8", errors="replace"), language="xml")

    if err := st.session_state.get("error"):
        st.error(err)


if __name__ == "__main__":
    main()
