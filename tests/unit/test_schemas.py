"""
Tests unitarios para la validación de requests.
"""
import pytest
from pydantic import ValidationError

from models.schemas import ConsultantRegistrationRequest, LinkFarmerRequest


class TestConsultantRegistrationRequest:
    def test_trims_and_drops_blank_strings(self):
        payload = ConsultantRegistrationRequest(
            country="  India ", state="   ", avatar_url=""
        )

        assert payload.country == "India"
        assert payload.state is None
        assert payload.avatar_url is None

    def test_location_over_limit_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ConsultantRegistrationRequest(district="x" * 101)

        assert "district exceeds maximum length of 100 characters" in str(exc_info.value)

    def test_location_at_limit_is_accepted(self):
        payload = ConsultantRegistrationRequest(service_district="x" * 100)

        assert len(payload.service_district) == 100

    def test_length_is_checked_after_trimming(self):
        payload = ConsultantRegistrationRequest(state=" " + "y" * 100 + " ")

        assert payload.state == "y" * 100

    @pytest.mark.parametrize("url", ["not a url", "example.com/avatar.png", "://missing"])
    def test_invalid_avatar_url(self, url):
        with pytest.raises(ValidationError) as exc_info:
            ConsultantRegistrationRequest(avatar_url=url)

        assert "Invalid avatar URL format" in str(exc_info.value)

    def test_valid_avatar_url(self):
        payload = ConsultantRegistrationRequest(
            avatar_url="https://cdn.example.com/avatars/co1.png"
        )

        assert payload.avatar_url.endswith("co1.png")

    def test_document_urls_must_be_a_list(self):
        with pytest.raises(ValidationError) as exc_info:
            ConsultantRegistrationRequest(document_urls="single.pdf")

        assert "document_urls must be an array" in str(exc_info.value)

    def test_document_urls_are_trimmed(self):
        payload = ConsultantRegistrationRequest(document_urls=[" a.pdf ", "", "b.pdf"])

        assert payload.document_urls == ["a.pdf", "b.pdf"]

    def test_consultant_updates(self):
        payload = ConsultantRegistrationRequest(country="India", document_urls=["a.pdf"])

        updates = payload.consultant_updates()

        assert updates["country"] == "India"
        assert updates["state"] is None
        assert updates["certificate_urls"] == ["a.pdf"]

    def test_consultant_updates_default_empty_documents(self):
        assert ConsultantRegistrationRequest().consultant_updates()["certificate_urls"] == []


class TestLinkFarmerRequest:
    def test_accepts_camel_case_body(self):
        payload = LinkFarmerRequest.model_validate(
            {"farmerId": "P1", "farmerProfileId": "F1"}
        )

        assert payload.farmer_id == "P1"
        assert payload.farmer_profile_id == "F1"

    def test_empty_ids_are_rejected(self):
        with pytest.raises(ValidationError):
            LinkFarmerRequest.model_validate({"farmerId": "", "farmerProfileId": "F1"})
