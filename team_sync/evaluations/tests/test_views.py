from unittest import mock

import pytest
from django.urls import reverse
from rest_framework import status

from team_sync.classes.models import Classroom
from team_sync.evaluations.models import DEFAULT_EVALUATION_TIME
from team_sync.evaluations.models import Evaluation
from team_sync.evaluations.models import EvaluationForm
from team_sync.teams.models import Team

pytestmark = pytest.mark.django_db

TRIGGER = "team_sync.realtime.events.presentations.trigger"

FIELDS = [
    {"type": "rating", "label": "Clarity", "required": True},
    {"type": "text", "label": "Comments", "required": False},
]


@pytest.fixture
def form(project, teacher) -> EvaluationForm:
    return EvaluationForm.objects.create(
        title="Round 1",
        description="Rate the demo",
        fields=FIELDS,
        evaluation_time=120,
        project=project,
        created_by=teacher,
    )


class TestEvaluationForms:
    def test_create(self, api_client, teacher, project):
        api_client.force_authenticate(teacher)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {
                "title": "Round 1",
                "description": "Rate the demo",
                "fields": FIELDS,
                "projectId": project.pk,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        assert res.data["evaluationTime"] == DEFAULT_EVALUATION_TIME
        assert res.data["project"] == project.pk
        assert res.data["created_by"]["id"] == teacher.pk
        assert res.data["fields"][1]["required"] is False

    @pytest.mark.parametrize("time_limit", [0, None, ""])
    def test_create_falls_back_to_default_time(self, api_client, teacher, project, time_limit):
        api_client.force_authenticate(teacher)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {
                "title": "Quick",
                "description": "-",
                "fields": FIELDS,
                "project": project.pk,
                "evaluationTime": time_limit,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        assert res.data["evaluationTime"] == DEFAULT_EVALUATION_TIME

    def test_create_keeps_explicit_time(self, api_client, teacher, project):
        api_client.force_authenticate(teacher)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {
                "title": "Long",
                "description": "-",
                "fields": FIELDS,
                "project": project.pk,
                "evaluation_time": 45,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        assert res.data["evaluationTime"] == 45

    def test_create_missing_fields(self, api_client, teacher, project):
        api_client.force_authenticate(teacher)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {"title": "Round 1", "project": project.pk},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data == {"error": "Missing required fields"}

    def test_create_rejects_duplicate_labels(self, api_client, teacher, project):
        api_client.force_authenticate(teacher)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {
                "title": "Dup",
                "description": "-",
                "fields": [FIELDS[0], FIELDS[0]],
                "project": project.pk,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert "fields" in res.data

    def test_peers_cannot_create(self, api_client, peer, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            reverse("api_v1:evaluation-forms-list"),
            {"title": "x", "description": "y", "fields": [], "project": project.pk},
            format="json",
        )
        assert res.status_code == status.HTTP_403_FORBIDDEN

    def test_for_project_returns_latest(self, api_client, peer, form, project, teacher):
        newer = EvaluationForm.objects.create(
            title="Round 2",
            description="-",
            fields=FIELDS,
            project=project,
            created_by=teacher,
        )
        api_client.force_authenticate(peer)
        res = api_client.get(
            reverse("api_v1:evaluation-forms-for-project", kwargs={"project_id": project.pk}),
        )
        assert res.status_code == status.HTTP_200_OK
        assert res.data["id"] == newer.pk

    def test_for_project_without_form_returns_placeholder(self, api_client, peer, project):
        api_client.force_authenticate(peer)
        res = api_client.get(
            reverse("api_v1:evaluation-forms-for-project", kwargs={"project_id": project.pk}),
        )
        assert res.status_code == status.HTTP_200_OK
        assert res.data == {
            "id": None,
            "title": "",
            "description": "",
            "fields": [],
            "evaluationTime": DEFAULT_EVALUATION_TIME,
            "project": project.pk,
        }

    def test_update_keeps_time_when_not_positive(self, api_client, teacher, form):
        api_client.force_authenticate(teacher)
        res = api_client.put(
            reverse("api_v1:evaluation-forms-detail", args=[form.pk]),
            {
                "title": "Round 1b",
                "description": "Updated",
                "fields": FIELDS,
                "evaluationTime": 0,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        form.refresh_from_db()
        assert form.title == "Round 1b"
        assert form.evaluation_time == 120

    def test_update_by_other_teacher_forbidden(self, api_client, other_teacher, form):
        api_client.force_authenticate(other_teacher)
        res = api_client.put(
            reverse("api_v1:evaluation-forms-detail", args=[form.pk]),
            {"title": "Mine", "description": "-", "fields": FIELDS},
            format="json",
        )
        assert res.status_code == status.HTTP_403_FORBIDDEN

    def test_delete(self, api_client, teacher, form):
        api_client.force_authenticate(teacher)
        res = api_client.delete(reverse("api_v1:evaluation-forms-detail", args=[form.pk]))
        assert res.status_code == status.HTTP_200_OK
        assert not EvaluationForm.objects.filter(pk=form.pk).exists()


class TestSubmitForTeam:
    def url(self, project):
        return reverse("api_v1:evaluation-forms-submit", kwargs={"project_id": project.pk})

    def test_submit_stores_and_announces(self, api_client, peer, form, team, project):
        api_client.force_authenticate(peer)
        with mock.patch(TRIGGER) as trigger:
            res = api_client.post(
                self.url(project),
                {"teamId": team.pk, "responses": {"Clarity": 5, "Comments": "Great"}},
                format="json",
            )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        evaluation = Evaluation.objects.get()
        assert evaluation.responses == {"Clarity": 5, "Comments": "Great"}
        assert evaluation.team == team
        trigger.assert_called_once_with(
            f"presentation-{project.pk}",
            "evaluation-submitted",
            {
                "evaluationId": evaluation.pk,
                "formId": form.pk,
                "teamId": team.pk,
                "submittedBy": peer.pk,
            },
        )

    def test_submit_survives_disabled_broadcast(
        self, api_client, peer, form, team, project, settings,
    ):
        settings.REALTIME_BROADCAST_ENABLED = False
        api_client.force_authenticate(peer)
        res = api_client.post(
            self.url(project),
            {"teamId": team.pk, "responses": {"Clarity": 3}},
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED
        assert Evaluation.objects.count() == 1

    def test_requires_team_and_responses(self, api_client, peer, form, project):
        api_client.force_authenticate(peer)
        res = api_client.post(self.url(project), {"responses": {"Clarity": 3}}, format="json")
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data == {"error": "Responses and team ID are required"}

    def test_no_form(self, api_client, peer, team, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            self.url(project),
            {"teamId": team.pk, "responses": {"Clarity": 3}},
            format="json",
        )
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert res.data == {"error": "Evaluation form not found"}

    def test_unknown_team(self, api_client, peer, form, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            self.url(project),
            {"teamId": 9999, "responses": {"Clarity": 3}},
            format="json",
        )
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert res.data == {"error": "Team not found"}

    def test_team_from_other_class(self, api_client, peer, form, project, other_teacher):
        elsewhere = Classroom.objects.create(name="Else", semester="1", teacher=other_teacher)
        stranger = Team.objects.create(name="Stranger", classroom=elsewhere)
        api_client.force_authenticate(peer)
        res = api_client.post(
            self.url(project),
            {"teamId": stranger.pk, "responses": {"Clarity": 3}},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data == {"error": "Team does not belong to this project"}

    def test_missing_required_answer(self, api_client, peer, form, team, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            self.url(project),
            {"teamId": team.pk, "responses": {"Comments": "no rating"}},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data == {"error": "Missing required fields", "fields": ["Clarity"]}
        assert not Evaluation.objects.exists()


class TestEvaluations:
    def test_submit_by_form_id(self, api_client, peer, form, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            reverse("api_v1:evaluations-submit", kwargs={"project_id": project.pk}),
            {"formId": form.pk, "responses": {"Clarity": "2"}},
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        assert res.data["responses"] == {"Clarity": 2}
        assert res.data["team"] is None

    def test_submit_requires_form_and_responses(self, api_client, peer, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            reverse("api_v1:evaluations-submit", kwargs={"project_id": project.pk}),
            {"formId": 1},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data == {"error": "Form ID and responses are required"}

    def test_submit_unknown_form(self, api_client, peer, project):
        api_client.force_authenticate(peer)
        res = api_client.post(
            reverse("api_v1:evaluations-submit", kwargs={"project_id": project.pk}),
            {"formId": 777, "responses": {"Clarity": 2}},
            format="json",
        )
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert res.data == {"error": "Form not found"}

    def test_peers_only_see_their_own(self, api_client, peer, user, teacher, form, project):
        mine = Evaluation.objects.create(
            form=form, project=project, submitted_by=peer, responses={"Clarity": 4},
        )
        Evaluation.objects.create(
            form=form, project=project, submitted_by=user, responses={"Clarity": 1},
        )
        url = reverse("api_v1:evaluations-for-project", kwargs={"project_id": project.pk})

        api_client.force_authenticate(peer)
        res = api_client.get(url)
        assert [row["id"] for row in res.data] == [mine.pk]

        api_client.force_authenticate(teacher)
        res = api_client.get(url)
        assert len(res.data) == 2

    def test_only_submitter_may_delete(self, api_client, peer, user, form, project):
        evaluation = Evaluation.objects.create(
            form=form, project=project, submitted_by=peer, responses={"Clarity": 4},
        )
        url = reverse("api_v1:evaluations-detail", args=[evaluation.pk])

        api_client.force_authenticate(user)
        assert api_client.delete(url).status_code == status.HTTP_403_FORBIDDEN

        api_client.force_authenticate(peer)
        res = api_client.delete(url)
        assert res.status_code == status.HTTP_200_OK
        assert res.data == {"message": "Evaluation deleted successfully"}
