from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status

from businesses.models import Business
from users.models import User, Profile
from .models import BusinessModelCanvas, ValuePropositionCanvas
from .text import text_to_lines, lines_to_text, has_line_break


class CanvasTextTest(SimpleTestCase):
    def test_round_trip(self):
        lines = ["Local cafes", "University clubs", "  indented entry", "Ends with space "]
        self.assertEqual(text_to_lines(lines_to_text(lines)), lines)

    def test_blank_lines_are_dropped(self):
        self.assertEqual(text_to_lines("a\n\nb"), ["a", "b"])
        self.assertEqual(text_to_lines("\n\na\n"), ["a"])

    def test_whitespace_only_lines_are_kept(self):
        self.assertEqual(text_to_lines("a\n   \nb"), ["a", "   ", "b"])

    def test_windows_line_endings(self):
        self.assertEqual(text_to_lines("a\r\nb\r\n"), ["a", "b"])

    def test_bare_carriage_return_is_a_line_break(self):
        self.assertEqual(text_to_lines("a\rb"), ["a", "b"])
        self.assertEqual(text_to_lines("a\r\rb\r"), ["a", "b"])
        self.assertTrue(has_line_break("a\rb"))
        self.assertFalse(has_line_break("a b"))

    def test_empty_input(self):
        self.assertEqual(text_to_lines(""), [])
        self.assertEqual(text_to_lines(None), [])
        self.assertEqual(lines_to_text([]), "")


class CanvasViewTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="owner@example.com", password="testpassword123")
        Profile.objects.create(user=self.user, role="student", full_name="Olivia Owner")
        self.business = Business.objects.create(
            owner=self.user,
            name="CodeCraft",
            description="Web sites for clubs",
            industry="Technology",
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.bmc_url = reverse("canvas", args=["bmc"])
        self.vpc_url = reverse("canvas", args=["vpc"])

    def test_requires_session(self):
        response = APIClient().get(self.bmc_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_empty_canvas_before_first_save(self):
        response = self.client.get(self.bmc_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["id"])
        self.assertEqual(response.data["key_partners"], [])
        self.assertEqual(response.data["text"]["revenue_streams"], "")
        self.assertFalse(BusinessModelCanvas.objects.exists())

    def test_first_save_creates_then_updates_in_place(self):
        response = self.client.put(self.bmc_url, {
            "key_partners": "University\n\nLocal print shop",
            "channels": ["Instagram", "", "Word of mouth"],
        }, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["key_partners"], ["University", "Local print shop"])
        self.assertEqual(response.data["channels"], ["Instagram", "Word of mouth"])
        self.assertEqual(response.data["text"]["key_partners"], "University\nLocal print shop")
        canvas = BusinessModelCanvas.objects.get(business=self.business)
        first_updated_at = canvas.updated_at

        response = self.client.put(self.bmc_url, {"key_partners": "University"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(BusinessModelCanvas.objects.count(), 1)
        canvas.refresh_from_db()
        self.assertEqual(canvas.key_partners, ["University"])
        # Fields left out of the request are kept
        self.assertEqual(canvas.channels, ["Instagram", "Word of mouth"])
        self.assertGreaterEqual(canvas.updated_at, first_updated_at)

    def test_value_proposition_canvas(self):
        response = self.client.put(self.vpc_url, {
            "customer_jobs": "Launch a club website",
            "pains": "No budget\nNo time",
            "gain_creators": "Templates",
        }, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        canvas = ValuePropositionCanvas.objects.get(business=self.business)
        self.assertEqual(canvas.pains, ["No budget", "No time"])
        self.assertEqual(canvas.gains, [])

        response = self.client.get(self.vpc_url)
        self.assertEqual(response.data["text"]["pains"], "No budget\nNo time")

    def test_list_entries_with_line_breaks_are_rejected(self):
        response = self.client.put(self.bmc_url, {"channels": ["Instagram\nTikTok"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Entries cannot contain line breaks.")

    def test_saved_lines_can_be_sent_back_as_a_list(self):
        response = self.client.put(self.bmc_url, {"key_partners": "Campus union\rPrint shop"}, format="json")
        self.assertEqual(response.data["key_partners"], ["Campus union", "Print shop"])

        response = self.client.put(self.bmc_url, {"key_partners": response.data["key_partners"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["key_partners"], ["Campus union", "Print shop"])

    def test_invalid_field_type(self):
        response = self.client.put(self.bmc_url, {"channels": 42}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_canvas_type(self):
        response = self.client.get(reverse("canvas", args=["swot"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Canvas type not found")

    def test_requires_business(self):
        newcomer = User.objects.create_user(email="new@example.com", password="testpassword123")
        Profile.objects.create(user=newcomer, role="student", full_name="Nina New")
        self.client.force_authenticate(user=newcomer)

        response = self.client.put(self.bmc_url, {"channels": "Instagram"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Business not found")

    def test_canvases_go_with_their_business(self):
        self.client.put(self.bmc_url, {"channels": "Instagram"}, format="json")
        self.client.put(self.vpc_url, {"pains": "No time"}, format="json")

        self.business.delete()

        self.assertFalse(BusinessModelCanvas.objects.exists())
        self.assertFalse(ValuePropositionCanvas.objects.exists())
