"""
Recorder component — phrase-by-phrase take capture and batch submission.

Per-phrase states: unrecorded -> recording -> recorded (redo -> unrecorded).
The ``RecordingSequencer`` in session state is the single source of truth;
this module only renders it and forwards user actions.
"""

import logging

import streamlit as st

from src.core.config import get_settings
from src.core.models import Demographics, TakeStatus
from src.services.audio import AudioProcessor
from src.services.sequencer import RecordingSequencer
from src.ui.api_client import APIError, get_api_client
from src.ui.components.demographics import render_demographics, reset_demographics

logger = logging.getLogger(__name__)

_processor = AudioProcessor()


def _client():
    return get_api_client(st.session_state.api_base_url)


def _ensure_session() -> RecordingSequencer | None:
    """Load phrases/regions once and create the sequencer for this browser session."""
    seq = st.session_state.get("sequencer")
    if seq is not None:
        return seq

    try:
        phrases = _client().list_phrases()
        regions = _client().list_regions()
    except APIError as exc:
        st.error(f"Could not load phrases: {exc.message}")
        return None

    seq = RecordingSequencer(phrases, shuffle=get_settings().shuffle_phrases)
    st.session_state.sequencer = seq
    st.session_state.regions = regions
    return seq


def _notify(kind: str, message: str) -> None:
    st.session_state.notification = {"type": kind, "message": message}


def _render_notification() -> None:
    note = st.session_state.get("notification")
    if not note:
        return
    col1, col2 = st.columns([5, 1])
    with col1:
        if note["type"] == "success":
            st.success(note["message"])
        else:
            st.error(note["message"])
    with col2:
        if st.button("Dismiss", key="dismiss_notification"):
            st.session_state.notification = None
            st.rerun()


def _render_navigation(seq: RecordingSequencer) -> None:
    col1, col2 = st.columns(2)
    with col1:
        if st.button(
            "Previous",
            disabled=seq.current_index <= 0 or seq.is_recording,
            use_container_width=True,
        ):
            seq.previous_phrase()
            st.rerun()
    with col2:
        if st.button(
            "Next",
            disabled=seq.current_index >= len(seq.phrases) - 1 or seq.is_recording,
            use_container_width=True,
        ):
            seq.next_phrase()
            st.rerun()


def _render_take(seq: RecordingSequencer) -> None:
    """Waveform and playback for the current phrase's take."""
    take = seq.take()
    if take is None:
        return
    try:
        samples, _ = _processor.decode(take.audio)
    except ValueError:
        st.audio(take.audio, format=take.mime_type)
        return
    st.area_chart(_processor.waveform_envelope(samples), height=80)
    if _processor.is_silent(samples):
        st.warning("This take looks silent. Consider recording it again.")
    st.audio(take.audio, format=take.mime_type)


def _capture(seq: RecordingSequencer) -> None:
    """Show the microphone widget and finalize the take once audio arrives."""
    attempt = st.session_state.get("capture_attempt", 0)
    audio = st.audio_input(
        "Speak the phrase, then stop the recorder",
        key=f"capture_{seq.speaker_id}_{seq.current_index}_{attempt}",
    )
    if st.button("Cancel", use_container_width=True):
        seq.cancel_recording()
        st.rerun()

    if audio is None:
        return
    audio_bytes = audio.getvalue()
    try:
        _processor.decode(audio_bytes)
    except ValueError as exc:
        # Device errors: abort the capture, keep every existing take
        logger.warning("Discarding unreadable capture: %s", exc)
        seq.cancel_recording()
        st.error("Error accessing microphone: no usable audio was captured.")
        return
    seq.stop_recording(audio_bytes, mime_type="audio/wav")
    st.rerun()


def _render_controls(seq: RecordingSequencer) -> None:
    status = seq.status()
    if status == TakeStatus.recording:
        _capture(seq)
        return

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Record", type="primary", use_container_width=True):
            seq.start_recording()
            st.session_state.capture_attempt = st.session_state.get("capture_attempt", 0) + 1
            st.rerun()
    with col2:
        if st.button("Redo", disabled=status != TakeStatus.recorded, use_container_width=True):
            seq.redo()
            st.rerun()


def _submit(seq: RecordingSequencer, demographics: Demographics) -> None:
    """Upload the batch; keep every take if the upload fails."""
    st.session_state.submitting = True
    try:
        submission = seq.build_submission(demographics)
        _client().upload_recordings(submission)
    except APIError as exc:
        logger.warning("Submission failed (%s): %s", exc.category, exc.message)
        _notify("error", "Failed to submit recordings. Please try again.")
    else:
        _notify("success", "All recordings have been successfully submitted!")
        seq.reset_after_submit()
        reset_demographics()
    finally:
        st.session_state.submitting = False


@st.dialog("Confirm Submission")
def _confirm_submit(seq: RecordingSequencer, demographics: Demographics) -> None:
    st.write("Are you sure you want to submit all recordings?")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Cancel", use_container_width=True):
            st.rerun()
    with col2:
        if st.button("Confirm", type="primary", use_container_width=True):
            with st.spinner("Submitting..."):
                _submit(seq, demographics)
            st.rerun()


def render_recorder() -> None:
    """Render the full recording UI based on current session state."""
    seq = _ensure_session()
    if seq is None:
        return
    if not seq.phrases:
        st.warning("The phrase list is empty.")
        return

    _render_notification()
    st.caption(f"{seq.progress} - Speaker ID: {seq.speaker_id}")

    _render_navigation(seq)

    phrase = seq.current_phrase
    if seq.status() == TakeStatus.recorded:
        st.success(phrase)
    else:
        st.info(phrase)

    _render_take(seq)
    _render_controls(seq)

    st.divider()
    demographics = render_demographics(st.session_state.get("regions", []))

    submitting = st.session_state.get("submitting", False)
    if st.button(
        "Submitting..." if submitting else "Submit All Recordings",
        type="primary",
        disabled=submitting or not seq.can_submit(demographics),
        use_container_width=True,
    ):
        _confirm_submit(seq, demographics)

    if seq.has_takes:
        st.caption(f"{seq.recorded_count} of {len(seq.phrases)} phrases recorded")
