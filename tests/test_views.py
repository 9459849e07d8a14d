"""Validation rules for incoming payloads."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from connexa.views import GroupCreateRequest, LoginRequest, UserRegistrationRequest


def _registration(**overrides):
    payload = {
        "full_name": "Ana Souza",
        "institutional_email": "Ana.Souza@Univ.EDU.BR",
        "password": "Segura@123",
        "course_id": 1,
        "current_semester": 3,
    }
    payload.update(overrides)
    return UserRegistrationRequest(**payload)


def test_registration_normalises_email_and_name():
    request = _registration(full_name="  José Álvares  ")

    assert request.institutional_email == "ana.souza@univ.edu.br"
    assert request.full_name == "José Álvares"


@pytest.mark.parametrize(
    "field,value",
    [
        ("full_name", "R2D2"),
        ("full_name", "A"),
        ("institutional_email", "ana@gmail.com"),
        ("password", "segura@123"),
        ("password", "SEGURA@123"),
        ("password", "Segura1234"),
        ("password", "Segura@abc"),
        ("password", "Segura@12#"),
        ("password", "S@1a"),
        ("course_id", 0),
        ("current_semester", 21),
    ],
)
def test_registration_rejects_invalid_fields(field, value):
    with pytest.raises(ValidationError) as excinfo:
        _registration(**{field: value})

    assert excinfo.value.errors()[0]["loc"] == (field,)


def test_login_lowercases_email():
    request = LoginRequest(institutional_email="BRUNO@univ.edu", password="x")

    assert request.institutional_email == "bruno@univ.edu"


def test_group_request_trims_and_blanks_optional_text():
    request = GroupCreateRequest(name="  Cálculo I - turma_B. ", description="   ", subject=" ")

    assert request.name == "Cálculo I - turma_B."
    assert request.description is None
    assert request.subject is None


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "ab"},
        {"name": "x" * 101},
        {"name": "Cálculo #1"},
        {"name": "Cálculo", "subject": "Mat<script>"},
        {"name": "Cálculo", "description": "d" * 501},
    ],
)
def test_group_request_rejects_invalid_payloads(payload):
    with pytest.raises(ValidationError):
        GroupCreateRequest(**payload)
