# businesses/tests.py
from datetime import timedelta
from types import SimpleNamespace

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient
from rest_framework import status

from config.exceptions import api_exception_handler
from users.models import User, Profile
from .embed import extract_youtube_id, youtube_embed_url
from .filters import filter_businesses, list_industries
from .models import Business


def make_user(email, role="student", full_name="Test User"):
    user = User.objects.create_user(email=email, password="testpassword123")
    Profile.objects.create(user=user, role=role, full_name=full_name)
    return user


def make_business(owner, name, industry="Technology", description="A student business", **extra):
    return Business.objects.create(owner=owner, name=name, industry=industry, description=description, **extra)


class YouTubeEmbedTest(SimpleTestCase):
    origin = "http://localhost:5173"

    def test_recognised_shapes(self):
        """Every supported link shape yields the same video id"""
        urls = [
            "https://youtu.be/abc123",
            "https://youtube.com/watch?v=abc123",
            "https://www.youtube.com/watch?v=abc123&t=5",
            "https://youtube.com/embed/abc123",
            "https://www.youtube.com/embed/abc123",
            "https://youtube.com/v/abc123",
            "http://www.youtube.com/v/abc123",
        ]
        for url in urls:
            with self.subTest(url=url):
                self.assertEqual(extract_youtube_id(url), "abc123")

    def test_embed_url_format(self):
        embed = youtube_embed_url("https://youtube.com/watch?v=xyz&t=5", self.origin)

        self.assertEqual(
            embed,
            "https://www.youtube.com/embed/xyz?enablejsapi=1&origin=http%3A%2F%2Flocalhost%3A5173&rel=0&modestbranding=1",
        )
        # Exactly one id segment after /embed/
        path = embed.split("?")[0]
        self.assertEqual(path.split("/embed/")[1], "xyz")

    def test_unrecognised_urls(self):
        """Anything that is not a known YouTube shape embeds nothing"""
        urls = [
            "https://example.com/abc123",
            "https://youtu.be/",
            "https://youtube.com/watch",
            "https://youtube.com/playlist?list=abc",
            "https://m.youtube.com/watch?v=abc123",
            "https://youtube.com/embed/",
            "https://youtu.be/abc/def",
            "not a url",
            "http://[::1",
            "",
            None,
        ]
        for url in urls:
            with self.subTest(url=url):
                self.assertIsNone(youtube_embed_url(url, self.origin))


class DirectoryFilterTest(SimpleTestCase):
    def setUp(self):
        self.businesses = [
            SimpleNamespace(name="Campus Coffee", description="Espresso and pastries", industry="Food & Beverage"),
            SimpleNamespace(name="CodeCraft", description="Web sites for clubs", industry="Technology"),
            SimpleNamespace(name="Thrift Corner", description="Second-hand clothing", industry="Retail"),
        ]

    def names(self, result):
        return [business.name for business in result]

    def test_empty_filters_keep_everything(self):
        self.assertEqual(filter_businesses(self.businesses), self.businesses)

    def test_search_is_case_insensitive_over_all_text_fields(self):
        self.assertEqual(self.names(filter_businesses(self.businesses, "COFFEE")), ["Campus Coffee"])
        self.assertEqual(self.names(filter_businesses(self.businesses, "clubs")), ["CodeCraft"])
        self.assertEqual(self.names(filter_businesses(self.businesses, "retail")), ["Thrift Corner"])
        self.assertEqual(filter_businesses(self.businesses, "nothing matches"), [])

    def test_industry_filter_is_exact_and_combined_with_search(self):
        self.assertEqual(self.names(filter_businesses(self.businesses, "", "Technology")), ["CodeCraft"])
        self.assertEqual(filter_businesses(self.businesses, "", "technology"), [])
        self.assertEqual(filter_businesses(self.businesses, "coffee", "Technology"), [])
        self.assertEqual(self.names(filter_businesses(self.businesses, "c", "Retail")), ["Thrift Corner"])

    def test_filter_is_idempotent(self):
        once = filter_businesses(self.businesses, "co", "")
        self.assertEqual(filter_businesses(once, "co", ""), once)

    def test_list_industries(self):
        businesses = self.businesses + [SimpleNamespace(name="X", description="", industry="Retail")]
        self.assertEqual(list_industries(businesses), ["Food & Beverage", "Technology", "Retail"])


class BusinessDirectoryViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        now = timezone.now()
        self.older = make_business(make_user("a@example.com"), "Campus Coffee", industry="Food & Beverage")
        self.newer = make_business(make_user("b@example.com"), "CodeCraft", youtube_video_url="https://youtu.be/abc123")
        Business.objects.filter(pk=self.older.pk).update(created_at=now - timedelta(days=2))
        Business.objects.filter(pk=self.newer.pk).update(created_at=now - timedelta(days=1))

    def test_list_newest_first(self):
        response = self.client.get(reverse("business-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b["name"] for b in response.data["businesses"]], ["CodeCraft", "Campus Coffee"])
        self.assertEqual(response.data["industries"], ["Technology", "Food & Beverage"])
        self.assertEqual(response.data["count"], 2)

    def test_list_with_filters(self):
        response = self.client.get(reverse("business-list"), {"search": "coffee"})
        self.assertEqual([b["name"] for b in response.data["businesses"]], ["Campus Coffee"])

        response = self.client.get(reverse("business-list"), {"industry": "Technology"})
        self.assertEqual([b["name"] for b in response.data["businesses"]], ["CodeCraft"])
        # Industry choices still reflect the whole directory
        self.assertEqual(len(response.data["industries"]), 2)

    def test_profile_view(self):
        response = self.client.get(reverse("business-profile", args=[self.newer.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "CodeCraft")
        self.assertTrue(response.data["embed_url"].startswith("https://www.youtube.com/embed/abc123?"))
        self.assertEqual(response.data["visitor_count"], 1)

        self.client.get(reverse("business-profile", args=[self.newer.pk]))
        self.newer.refresh_from_db()
        self.assertEqual(self.newer.visitor_count, 2)

    def test_profile_without_video_has_no_embed(self):
        response = self.client.get(reverse("business-profile", args=[self.older.pk]))
        self.assertIsNone(response.data["embed_url"])

    def test_profile_not_found(self):
        response = self.client.get(reverse("business-profile", args=[987654]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Business not found"})


class BusinessManageViewTest(TestCase):
    def setUp(self):
        self.user = make_user("owner@example.com")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.url = reverse("business-manage")
        self.payload = {
            "name": "Campus Coffee",
            "description": "Fresh coffee between lectures",
            "industry": "Food & Beverage",
            "website_url": "https://coffee.example.com",
            "email": "hello@coffee.example.com",
            "phone": "555-0100",
            "youtube_video_url": "https://youtu.be/abc123",
        }

    def test_requires_session(self):
        response = APIClient().get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["redirect"], "/login")

    def test_no_business_yet(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["business"])
        self.assertIn("Technology", response.data["industries"])

    def test_create_business(self):
        response = self.client.post(self.url, self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["owner"], self.user.pk)
        self.assertFalse(response.data["featured"])
        self.assertEqual(response.data["visitor_count"], 0)
        self.assertIsNotNone(response.data["created_at"])
        self.assertEqual(Business.objects.get(owner=self.user).name, "Campus Coffee")

        response = self.client.get(self.url)
        self.assertEqual(response.data["business"]["name"], "Campus Coffee")

    def test_second_create_is_rejected(self):
        self.client.post(self.url, self.payload, format="json")
        response = self.client.post(self.url, dict(self.payload, name="Second Shop"), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "You already have a business.")
        self.assertEqual(Business.objects.filter(owner=self.user).count(), 1)

    def test_create_validation(self):
        response = self.client.post(self.url, dict(self.payload, name="ab", industry="Mining"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("name", response.data["errors"])
        self.assertIn("industry", response.data["errors"])
        self.assertFalse(Business.objects.exists())

    def test_update_business(self):
        self.client.post(self.url, self.payload, format="json")

        response = self.client.patch(self.url, {"description": "Now with tea", "featured": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        business = Business.objects.get(owner=self.user)
        self.assertEqual(business.description, "Now with tea")
        # Featured flag is not the owner's to set
        self.assertFalse(business.featured)

    def test_update_without_business(self):
        response = self.client.put(self.url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class DashboardViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("dashboard")
        self.admin = make_user("admin@example.com", role="admin", full_name="Ada Admin")
        self.student = make_user("student@example.com", role="student", full_name="Sam Student")
        self.other = make_user("other@example.com", role="student", full_name="Olive Other")
        make_business(self.student, "CodeCraft", featured=True)
        make_business(self.other, "Thrift Corner", industry="Retail")

    def test_student_sees_only_own_business(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "student")
        self.assertEqual(response.data["business"]["name"], "CodeCraft")
        self.assertFalse(response.data["can_create_business"])
        self.assertEqual(response.data["manage_url"], "/business/manage")
        self.assertNotIn("users", response.data)
        self.assertNotIn("stats", response.data)

    def test_student_never_gets_user_table(self):
        """Asking for the users tab does not change what a student sees"""
        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url, {"tab": "users"})

        self.assertNotIn("users", response.data)
        self.assertNotIn("tabs", response.data)

    def test_student_without_business(self):
        newcomer = make_user("new@example.com")
        self.client.force_authenticate(user=newcomer)
        response = self.client.get(self.url)

        self.assertIsNone(response.data["business"])
        self.assertTrue(response.data["can_create_business"])

    def test_admin_overview(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["active_tab"], "overview")
        self.assertEqual(response.data["stats"], {
            "total_businesses": 2,
            "total_users": 3,
            "featured_businesses": 1,
        })
        owners = {b["name"]: b["owner_name"] for b in response.data["businesses"]}
        self.assertEqual(owners, {"CodeCraft": "Sam Student", "Thrift Corner": "Olive Other"})
        self.assertNotIn("users", response.data)

    def test_admin_users_tab(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(self.url, {"tab": "users"})

        self.assertEqual(response.data["active_tab"], "users")
        rows = {row["id"]: row for row in response.data["users"]}
        self.assertEqual(len(rows), 3)
        self.assertFalse(rows[self.admin.pk]["can_delete"])
        self.assertTrue(rows[self.student.pk]["can_delete"])

    def test_unknown_tab_falls_back_to_overview(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(self.url, {"tab": "nonsense"})
        self.assertEqual(response.data["active_tab"], "overview")

    def test_missing_profile(self):
        bare = User.objects.create_user(email="bare@example.com", password="testpassword123")
        self.client.force_authenticate(user=bare)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Profile not found")


class ApiExceptionHandlerTest(SimpleTestCase):
    def test_database_error_becomes_503(self):
        response = api_exception_handler(DatabaseError("connection lost"), {"view": None})

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data, {"error": "Service temporarily unavailable."})

    def test_validation_error_keeps_field_detail(self):
        response = api_exception_handler(ValidationError({"name": ["Too short."]}), {})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Too short.")
        self.assertEqual(response.data["errors"], {"name": ["Too short."]})

    def test_unhandled_errors_are_left_alone(self):
        self.assertIsNone(api_exception_handler(RuntimeError("boom"), {}))
