"""Domain modules package."""

from tutorhub.modules.audit import models as audit_models  # noqa: F401
from tutorhub.modules.billing import models as billing_models  # noqa: F401
from tutorhub.modules.cart import models as cart_models  # noqa: F401
from tutorhub.modules.duas import models as duas_models  # noqa: F401
from tutorhub.modules.identity import models as identity_models  # noqa: F401
from tutorhub.modules.lessons import models as lessons_models  # noqa: F401
from tutorhub.modules.scheduling import models as scheduling_models  # noqa: F401
from tutorhub.modules.teachers import models as teachers_models  # noqa: F401
