# Repositories package.
#
# Each module exposes async functions that encapsulate database access for
# a single entity:
#
#   article  — pagination, lookups, save/remove + list cache for Article
#   user     — lookups for User
#
# All functions accept an AsyncSession as their first argument so that the
# router layer controls the transaction boundary via the ``get_db``
# dependency.  Functions flush but never commit.
