"""Problem-selection and application submission forms."""

from __future__ import annotations

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import HiddenField, RadioField, SelectField, StringField, TextAreaField, URLField
from wtforms.validators import URL, Length, Optional

from hackhub.models import ProblemType
from hackhub.services.problem_selection import PROBLEM_STATEMENTS
from hackhub.services.uploads import ALLOWED_EXTENSIONS


class ProblemSelectionForm(FlaskForm):
    """Single-choice list of problem statements."""

    problem = RadioField(
        "Problem statement",
        choices=[(problem.id, problem.title) for problem in PROBLEM_STATEMENTS],
        validate_choice=False,
        validators=[Optional()]
    )


class OpenProblemConfirmForm(FlaskForm):
    """Confirmation step for the open problem statement."""

    problem = HiddenField(default='open')


class ApplicationForm(FlaskForm):
    """Project application. Required fields depend on the problem type."""

    problem_type = SelectField(
        "Problem Type",
        choices=[
            (ProblemType.LLM_AGENTS.value, 'LLM Agents'),
            (ProblemType.AI_FILMMAKING.value, 'AI Filmmaking'),
        ],
        default=ProblemType.LLM_AGENTS.value
    )

    title = StringField(
        "Application Name",
        validators=[Optional(), Length(max=255)],
        render_kw={"placeholder": "Enter your application name"}
    )

    description = TextAreaField(
        "Description",
        render_kw={"rows": 10, "placeholder": "Markdown supported"}
    )

    url = URLField(
        "Application URL",
        validators=[Optional(), URL(message="Enter a full http(s) link"), Length(max=1000)],
        render_kw={"placeholder": "https://your-app.com"}
    )

    github_url = URLField(
        "GitHub Repository URL",
        validators=[Optional(), URL(message="Enter a full http(s) link"), Length(max=1000)],
        render_kw={"placeholder": "https://github.com/username/repo"}
    )

    video_url = URLField(
        "Demo / Explanation Video",
        validators=[Optional(), URL(message="Enter a full http(s) link"), Length(max=1000)],
        render_kw={"placeholder": "https://drive.google.com/file/d/your-video-id/view"}
    )

    screenshot = FileField(
        "Screenshot / Logo",
        validators=[Optional(), FileAllowed(sorted(ALLOWED_EXTENSIONS), 'Images only!')]
    )

    screenshot_url = HiddenField()

    tags = StringField(
        "Tags (comma separated)",
        validators=[Optional(), Length(max=500)],
        render_kw={"placeholder": "react, typescript, web3"}
    )
