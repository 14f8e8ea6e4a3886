"""Demographics form — gender, age group, and region for the current batch."""

import streamlit as st
from pydantic import ValidationError

from src.core.models import Demographics

GENDER_OPTIONS = ["male", "female", "other"]
AGE_GROUP_OPTIONS = ["under 18", "18-30", "31-45", "46-60", "60+"]


def _key(name: str) -> str:
    # Bumping demographics_version after a submission yields fresh, empty widgets
    return f"demo_{name}_{st.session_state.get('demographics_version', 0)}"


def render_demographics(regions: list[str]) -> Demographics | None:
    """Render the demographics inputs.

    Returns:
        A validated ``Demographics`` once every field is filled, else None.
    """
    st.subheader("Speaker details")
    col1, col2, col3 = st.columns(3)
    with col1:
        gender = st.selectbox(
            "Gender", GENDER_OPTIONS, index=None, placeholder="Select...", key=_key("gender")
        )
    with col2:
        age_group = st.selectbox(
            "Age group", AGE_GROUP_OPTIONS, index=None, placeholder="Select...", key=_key("age")
        )
    with col3:
        if regions:
            region = st.selectbox(
                "Region", regions, index=None, placeholder="Select...", key=_key("region")
            )
        else:
            region = st.text_input("Region", key=_key("region_text")) or None

    if not (gender and age_group and region):
        return None
    try:
        return Demographics(gender=gender, age_group=age_group, region=region)
    except ValidationError:
        st.error("Region must not contain '|' or line breaks.")
        return None


def reset_demographics() -> None:
    st.session_state.demographics_version = st.session_state.get("demographics_version", 0) + 1
