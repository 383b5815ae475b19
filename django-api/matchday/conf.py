from django.conf import settings

from matchday.domain.settlement import DEFAULT_RULE_XP

DEFAULT_XP: dict[str, int] = {**DEFAULT_RULE_XP, **getattr(settings, "MATCHDAY_DEFAULT_XP", {})}
