from django.apps import AppConfig


class GestaoClinicaConfig(AppConfig):
    name = "gestao_clinica_api"
    verbose_name = "Gestão Clínica API"

    def ready(self):
        from django.conf import settings

        # ─── DI containers ──────────────────────────────────────────
        from clinica_core.adapters.config.composition_root import (
            setup_di_container_from_settings as build_core_container,
        )
        from estoque.adapters.config.composition_root import (
            setup_di_container_from_settings as build_estoque_container,
        )
        from financeiro.adapters.config.composition_root import (
            setup_di_container_from_settings as build_financeiro_container,
        )

        # core primeiro: estoque e financeiro registram nos mesmos buses
        build_core_container(settings)
        build_estoque_container(settings)
        build_financeiro_container(settings)
