"""Integration tests for TryOnStudio driving a full wizard session."""

import httpx
import pytest

from tryon_studio.config import MessagesConfig, StudioConfig
from tryon_studio.models import WizardStage
from tryon_studio.pipeline import LoggingNotifier, TryOnStudio
from tryon_studio.services import GeminiImageClient


class TestStudioInitialization:

    def test_default_client_and_notifier(self, config):
        studio = TryOnStudio(config)

        assert isinstance(studio.client, GeminiImageClient)
        assert studio.client.api_key == "test-key"
        assert studio.state.stage is WizardStage.PERSON
        assert len(studio.history) == 0

    def test_custom_notifier_has_no_notices(self, config, mock_client):
        studio = TryOnStudio(config, client=mock_client, notifier=LoggingNotifier())

        assert studio.drain_notices() == []


class TestFullSession:

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_person_garment_result_retry(self, studio, mock_client, images):
        """Upload, generate, confirm, retry, and generate again."""
        state = studio.upload_person(images["P1"])
        assert state.stage is WizardStage.GARMENT

        mock_client.synthesize_garment.return_value = [images["G1"]]
        await studio.generate_garment("red silk gown")
        assert studio.state.pool.generated == (images["G1"],)
        assert studio.state.selection.garment_image == images["G1"]

        mock_client.synthesize_try_on.return_value = [images["R1"]]
        result = await studio.confirm_garment()
        assert result == images["R1"]
        assert studio.state.stage is WizardStage.RESULT
        assert studio.state.selection.result_image == images["R1"]
        assert len(studio.history) == 1
        entry = studio.history.get(0)
        assert (entry.person_image, entry.garment_image, entry.result_image) == (
            images["P1"], images["G1"], images["R1"],
        )

        state = studio.retry_garment()
        assert state.stage is WizardStage.GARMENT
        assert state.selection.garment_image == images["G1"]
        assert len(studio.history) == 1

        mock_client.synthesize_garment.return_value = [images["G2"]]
        await studio.generate_garment("red silk gown")
        assert studio.state.pool.generated == (images["G2"], images["G1"])
        assert studio.state.selection.garment_image == images["G2"]

    @pytest.mark.asyncio
    async def test_reset_keeps_history(self, studio, mock_client, images):
        studio.upload_person(images["P1"])
        studio.upload_garment(images["G1"])
        mock_client.synthesize_try_on.return_value = [images["R1"]]
        await studio.confirm_garment()

        state = studio.reset()

        assert state.stage is WizardStage.PERSON
        assert state.selection.person_image is None
        assert state.selection.garment_image is None
        assert state.selection.result_image is None
        assert len(studio.history) == 1

    @pytest.mark.asyncio
    async def test_restore_changes_only_result(self, studio, mock_client, images):
        studio.upload_person(images["P1"])
        studio.upload_garment(images["G1"])
        mock_client.synthesize_try_on.return_value = [images["R1"]]
        await studio.confirm_garment()
        studio.retry_garment()
        mock_client.synthesize_try_on.return_value = [images["R2"]]
        await studio.confirm_garment()
        before = studio.state

        state = studio.restore_history(1)

        assert state.selection.result_image is studio.history.get(1).result_image
        assert state.selection.result_image == images["R1"]
        assert state.stage is before.stage
        assert state.selection.person_image == before.selection.person_image
        assert state.selection.garment_image == before.selection.garment_image

    def test_restore_bad_index(self, studio):
        with pytest.raises(IndexError):
            studio.restore_history(0)

    @pytest.mark.asyncio
    async def test_empty_try_on_notifies_once(self, studio, mock_client, images):
        studio.upload_person(images["P1"])
        studio.upload_garment(images["G1"])
        mock_client.synthesize_try_on.return_value = []

        assert await studio.confirm_garment() is None

        assert studio.drain_notices() == [MessagesConfig().try_on_empty]
        assert studio.state.selection.result_image is None
        assert studio.state.stage is WizardStage.RESULT
        assert len(studio.history) == 0

    @pytest.mark.asyncio
    async def test_confirm_without_garment_does_nothing(self, studio, mock_client, images):
        studio.upload_person(images["P1"])

        assert await studio.confirm_garment() is None

        assert studio.state.stage is WizardStage.GARMENT
        mock_client.synthesize_try_on.assert_not_called()

    def test_navigation(self, studio, images):
        assert studio.navigate(WizardStage.GARMENT).stage is WizardStage.PERSON
        studio.upload_person(images["P1"])
        assert studio.navigate(WizardStage.PERSON).stage is WizardStage.PERSON
        assert studio.navigate(WizardStage.GARMENT).stage is WizardStage.GARMENT


class TestFileUploads:

    @pytest.mark.asyncio
    async def test_upload_person_file(self, studio, temp_image_file, minimal_png_bytes):
        state = await studio.upload_person_file(temp_image_file)

        assert state.stage is WizardStage.GARMENT
        assert state.selection.person_image.to_bytes() == minimal_png_bytes

    @pytest.mark.asyncio
    async def test_unreadable_person_file_changes_nothing(self, studio, tmp_path):
        before = studio.state

        state = await studio.upload_person_file(tmp_path / "missing.png")

        assert state == before
        assert studio.drain_notices() == []

    @pytest.mark.asyncio
    async def test_upload_garment_file(self, studio, temp_image_file):
        state = await studio.upload_garment_file(temp_image_file)

        assert state.pool.uploaded is not None
        assert state.selection.garment_image == state.pool.uploaded


class TestExport:

    def test_no_result(self, studio):
        assert studio.export_result() is None

    @pytest.mark.asyncio
    async def test_export_current_result(self, mock_client, images):
        config = StudioConfig(gemini_api_key="k", download_filename="look.png")
        studio = TryOnStudio(config, client=mock_client)
        studio.upload_person(images["P1"])
        studio.upload_garment(images["G1"])
        mock_client.synthesize_try_on.return_value = [images["R1"]]
        await studio.confirm_garment()

        export = studio.export_result()

        assert export.filename == "look.png"
        assert export.media_type == "image/png"
        assert export.content == b"R1"


class TestTransportFailures:

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_unexpected_transport_error_stays_inside(self, config, images):
        """A non-httpx error raised mid-request becomes a notice, not a crash."""
        def handler(request):
            raise RuntimeError("transport bug")

        client = GeminiImageClient(
            config=config.gemini,
            api_key="test-key",
            transport=httpx.MockTransport(handler),
        )
        studio = TryOnStudio(config, client=client)
        studio.upload_person(images["P1"])

        assert await studio.generate_garment("red silk gown") == []

        assert not studio.state.in_flight
        assert studio.drain_notices() == [config.messages.garment_failed]
        await studio.aclose()
