"""
Profile settings owned by the user themself.
"""

import logging

from django.db import transaction

from .edges import persist
from .errors import NotAuthorizedError, NotFoundError
from .models import Profile
from .resolvers import find

logger = logging.getLogger(__name__)


def set_follow_lists_public(user_id: int, requester_id: int, public: bool) -> Profile:
    """
    Show or hide a user's followers/following lists.

    Only the owner may change it (NotAuthorizedError('update privacy settings')).
    """
    with transaction.atomic():
        profile = find(Profile, user_id, lock=True)
        if profile is None:
            raise NotFoundError('User')
        if profile.pk != int(requester_id):
            raise NotAuthorizedError('update privacy settings')

        profile.follow_lists_public = bool(public)
        persist(profile, ['follow_lists_public'])

    logger.debug("user %s follow_lists_public=%s", profile.pk, profile.follow_lists_public)
    return profile
