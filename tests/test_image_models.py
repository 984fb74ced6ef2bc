"""
Tests for the image request builder and response models.
"""

import unittest
import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from diffusion.exceptions.diffusion_exceptions import InvalidParameterError
from diffusion.models.image_models import (
    DiffusionImage, ImageModel, ImageOrientation, ImageRequest, ImageSize,
    ImageStatus, ImageSteps, ImageToken, JobState
)


class TestImageRequestDefaults(unittest.TestCase):
    """Test a request built from only a prompt."""

    def test_defaults(self):
        """Test default steps, model, size and orientation."""
        request = ImageRequest("a red fox in the snow")

        self.assertEqual(request.prompt, "a red fox in the snow")
        self.assertIsNone(request.negative)
        self.assertEqual(request.steps, ImageSteps.FIFTY)
        self.assertEqual(request.model, ImageModel.BEAUTY_REALISM)
        self.assertEqual(request.size, ImageSize.SMALL)
        self.assertEqual(request.orientation, ImageOrientation.SQUARE)

    def test_default_model_accepts_hyphenated_spelling(self):
        """Test that beauty-realism names the default model."""
        request = ImageRequest("fox")
        self.assertIs(ImageModel.parse("beauty-realism"), request.model)

    def test_default_payload(self):
        """Test the JSON body of a default request."""
        payload = ImageRequest("fox").to_payload()

        self.assertEqual(payload, {
            "prompt": "fox",
            "steps": 50,
            "model": "beauty_realism",
            "size": "small",
            "orientation": "square",
        })
        self.assertNotIn("negative", payload)


class TestImageRequestBuilder(unittest.TestCase):
    """Test chained updates of an image request."""

    def setUp(self):
        self.request = ImageRequest("a lighthouse at dusk")

    def test_chained_updates(self):
        """Test that every update can be chained."""
        request = (
            self.request
            .update_negative_prompt("blurry")
            .update_steps(150)
            .update_model("anime_realism")
            .update_size("large")
            .update_orientation("portrait")
        )

        self.assertEqual(request.to_payload(), {
            "prompt": "a lighthouse at dusk",
            "negative": "blurry",
            "steps": 150,
            "model": "anime_realism",
            "size": "large",
            "orientation": "portrait",
        })

    def test_updates_return_new_request(self):
        """Test that updating leaves the original request untouched."""
        updated = self.request.update_steps(ImageSteps.TWO_HUNDRED)

        self.assertEqual(updated.steps, ImageSteps.TWO_HUNDRED)
        self.assertEqual(self.request.steps, ImageSteps.FIFTY)

    def test_accepts_enum_members_and_spellings(self):
        """Test the accepted spellings of enum values."""
        self.assertEqual(self.request.update_steps("100").steps, ImageSteps.ONE_HUNDRED)
        self.assertEqual(self.request.update_model(ImageModel.TOON_ANIMATED).model, ImageModel.TOON_ANIMATED)
        self.assertEqual(self.request.update_model("Dream-Reality").model, ImageModel.DREAM_REALITY)
        self.assertEqual(self.request.update_size("MEDIUM").size, ImageSize.MEDIUM)
        self.assertEqual(self.request.update_orientation(" landscape ").orientation, ImageOrientation.LANDSCAPE)

    def test_invalid_values_rejected_without_mutation(self):
        """Test that every mutator rejects values outside its set."""
        cases = [
            ("update_steps", 75, "steps"),
            ("update_steps", "fiftyish", "steps"),
            ("update_steps", True, "steps"),
            ("update_steps", None, "steps"),
            ("update_model", "photoreal", "model"),
            ("update_model", 3, "model"),
            ("update_size", "huge", "size"),
            ("update_orientation", "diagonal", "orientation"),
            ("update_negative_prompt", "   ", "negative"),
        ]
        before = self.request.model_dump()

        for method, value, parameter in cases:
            with self.subTest(method=method, value=value):
                with self.assertRaises(InvalidParameterError) as ctx:
                    getattr(self.request, method)(value)
                self.assertEqual(ctx.exception.parameter, parameter)
                self.assertEqual(self.request.model_dump(), before)

    def test_invalid_value_lists_allowed_values(self):
        """Test that the error names the allowed values."""
        with self.assertRaises(InvalidParameterError) as ctx:
            self.request.update_size("huge")

        self.assertEqual(ctx.exception.allowed, ["small", "medium", "large"])
        self.assertIn("small, medium, large", str(ctx.exception))

    def test_negative_prompt_can_be_cleared(self):
        """Test that None removes the negative prompt."""
        request = self.request.update_negative_prompt("text").update_negative_prompt(None)
        self.assertIsNone(request.negative)

    def test_request_is_frozen(self):
        """Test that fields cannot be assigned directly."""
        with self.assertRaises(Exception):
            self.request.steps = ImageSteps.ONE_HUNDRED


class TestImageRequestPrompt(unittest.TestCase):
    """Test prompt validation."""

    def test_empty_prompt_rejected(self):
        """Test that empty and blank prompts are rejected."""
        for prompt in ["", "   ", "\n\t", None, 42]:
            with self.subTest(prompt=prompt):
                with self.assertRaises(InvalidParameterError) as ctx:
                    ImageRequest(prompt)
                self.assertEqual(ctx.exception.parameter, "prompt")

    def test_keyword_fields_are_validated(self):
        """Test that constructor keywords go through the same checks."""
        request = ImageRequest("fox", steps=200, model="stable_diffusion")
        self.assertEqual(request.steps, ImageSteps.TWO_HUNDRED)
        self.assertEqual(request.model, ImageModel.STABLE_DIFFUSION)

        with self.assertRaises(InvalidParameterError):
            ImageRequest("fox", orientation="round")

    def test_unknown_keyword_rejected(self):
        """Test that unknown fields raise TypeError."""
        with self.assertRaises(TypeError):
            ImageRequest("fox", seed=42)


class TestEnumerations(unittest.TestCase):
    """Test the closed parameter sets."""

    def test_choices(self):
        """Test the values offered for each parameter."""
        self.assertEqual(ImageSteps.choices(), ["50", "100", "150", "200"])
        self.assertEqual(len(ImageModel.choices()), 8)
        self.assertEqual(ImageSize.choices(), ["small", "medium", "large"])
        self.assertEqual(ImageOrientation.choices(), ["square", "landscape", "portrait"])

    def test_parameter_names(self):
        """Test the parameter names reported in errors."""
        self.assertEqual(ImageSteps.parameter_name(), "steps")
        self.assertEqual(ImageOrientation.parameter_name(), "orientation")


class TestResponseModels(unittest.TestCase):
    """Test tokens, images and statuses."""

    def test_token_is_opaque(self):
        """Test that tokens pass through unchanged."""
        token = ImageToken(token="abc-123")
        self.assertEqual(str(token), "abc-123")
        self.assertEqual(token.model_dump(), {"token": "abc-123"})

    def test_image_ignores_unknown_fields(self):
        """Test that extra fields in image data are ignored."""
        image = DiffusionImage.model_validate({
            "id": 7, "raw": "data:image/png;base64,AAAA", "steps": 50,
            "credits_used": 1, "watermark": False
        })
        self.assertEqual(image.id, 7)
        self.assertFalse(image.is_url)
        self.assertTrue(DiffusionImage(raw="https://cdn.diffusion.to/x.png").is_url)

    def test_status_constructors(self):
        """Test pending, ready and failed statuses."""
        image = DiffusionImage(raw="AAAA")

        self.assertTrue(ImageStatus.pending().is_pending)
        ready = ImageStatus.ready(image)
        self.assertTrue(ready.is_ready)
        self.assertEqual(ready.image, image)
        failed = ImageStatus.failed("nsfw content")
        self.assertEqual(failed.state, JobState.FAILED)
        self.assertEqual(failed.reason, "nsfw content")


if __name__ == '__main__':
    unittest.main()
