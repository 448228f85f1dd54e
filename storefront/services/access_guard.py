# storefront/services/access_guard.py
from storefront.domain.enums import Role
from storefront.domain.errors import Forbidden
from storefront.services.identity import Principal


class AccessGuard:
    """
    Jedno miejsce na sprawdzanie uprawnien:
    - owner-only dla koszyka i zamowien klienta
    - admin-only dla zmiany statusu i listy wszystkich zamowien
    """

    def is_owner(self, customer_id: int | None, resource) -> bool:
        # koszyk goscia (user_id = NULL) nie ma wlasciciela
        if resource is None or customer_id is None:
            return False
        return resource.user_id == customer_id

    def is_admin(self, role) -> bool:
        return role == Role.ADMIN

    def require_owner(self, principal: Principal, resource) -> None:
        if not self.is_owner(principal.subject_id, resource):
            raise Forbidden()

    def require_owner_or_admin(self, principal: Principal, resource) -> None:
        if not (self.is_admin(principal.role) or self.is_owner(principal.subject_id, resource)):
            raise Forbidden()

    def require_admin(self, principal: Principal) -> None:
        if not self.is_admin(principal.role):
            raise Forbidden("Admin access required")
