from .auth import LoginForm
from .submission import ApplicationForm, OpenProblemConfirmForm, ProblemSelectionForm

__all__ = ['LoginForm', 'ApplicationForm', 'OpenProblemConfirmForm', 'ProblemSelectionForm']
