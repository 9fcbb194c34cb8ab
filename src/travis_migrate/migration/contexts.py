"""Required status check context migration."""

from typing import Dict, List, Sequence

# travis-ci.org reported statuses under these (misspelled) contexts, the
# GitHub App on travis-ci.com reports check runs under the new names.
CONTEXT_MAPPING: Dict[str, str] = {
    'continuos-integration/travis-ci': 'Travis CI - Branch',
    'continuos-integration/travis-ci/push': 'Travis CI - Branch',
    'continuos-integration/travis-ci/pr': 'Travis CI - Pull Request',
}


def migrate_protection_contexts(contexts: Sequence[str]) -> List[str]:
    """Map legacy Travis CI contexts to their travis-ci.com names.

    Unknown contexts are kept as they are and the order is preserved, so the
    function is idempotent.

    Args:
        contexts: Required status check contexts of a branch

    Returns:
        Migrated contexts
    """
    return [CONTEXT_MAPPING.get(context, context) for context in contexts]

