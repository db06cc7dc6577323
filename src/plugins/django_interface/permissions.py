from rest_framework.permissions import BasePermission


class IsMedicoUser(BasePermission):
    """Permite acesso apenas a usuários autenticados com `medico_id` resolvido do token."""

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and getattr(user, "is_authenticated", False)
            and getattr(user, "medico_id", None)
        )
