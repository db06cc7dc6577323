from dependency_injector import containers, providers

container = None

def setup_di_container_from_settings(settings):
    """Inicializa o DI container após o Django já estar com settings carregados."""
    global container  # noqa: PLW0603
    if container is not None:
        import structlog
        structlog.get_logger().debug("DI container já inicializado.")
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    import structlog

    from clinica_core.adapters.repositories.patient_repo_impl import PatientRepoImpl
    from clinica_core.adapters.repositories.provider_credential_repo_impl import ProviderCredentialRepoImpl
    from clinica_core.adapters.repositories.tenant_settings_repo_impl import TenantSettingsRepoImpl
    from clinica_core.adapters.security.token_cipher import TokenCipher
    from clinica_core.adapters.security.webhook_signature import WebhookSignatureVerifier

    # Commands
    from clinica_core.core.application.commands.patient_commands import (
        CreatePatientCommand,
        DeletePatientCommand,
        UpdatePatientCommand,
    )
    from clinica_core.core.application.commands.tenant_settings_commands import UpdateTenantSettingsCommand

    # CQRS buses
    from clinica_core.core.application.cqrs import CommandBusImpl, QueryBusImpl

    # Handlers
    from clinica_core.core.application.handlers.patient_handlers import (
        CreatePatientHandler,
        DeletePatientHandler,
        GetPatientHandler,
        ListPatientsHandler,
        UpdatePatientHandler,
    )
    from clinica_core.core.application.handlers.tenant_settings_handlers import (
        GetTenantSettingsHandler,
        UpdateTenantSettingsHandler,
    )

    # Queries
    from clinica_core.core.application.queries.patient_queries import GetPatientQuery, ListPatientsQuery
    from clinica_core.core.application.queries.tenant_settings_queries import GetTenantSettingsQuery
    from clinica_core.core.domain.services.event_dispatcher import EventDispatcher

    # ─────────────────────────────────────────────────────────
    # Construção do container DI
    # ─────────────────────────────────────────────────────────
    class Container(containers.DeclarativeContainer):
        config = providers.Configuration()

        # Infra
        logger           = providers.Singleton(structlog.get_logger)
        event_dispatcher = providers.Singleton(EventDispatcher)

        # CQRS
        command_bus = providers.Singleton(CommandBusImpl, dispatcher=event_dispatcher)
        query_bus   = providers.Singleton(QueryBusImpl)

        # Segurança
        token_cipher     = providers.Singleton(TokenCipher, key=config.encryption_key)
        webhook_verifier = providers.Singleton(WebhookSignatureVerifier)

        # Repositórios
        credential_repo      = providers.Singleton(ProviderCredentialRepoImpl, cipher=token_cipher)
        patient_repo         = providers.Singleton(PatientRepoImpl)
        tenant_settings_repo = providers.Singleton(TenantSettingsRepoImpl, credential_repo=credential_repo)

        # Handlers de comando
        create_patient_handler = providers.Factory(CreatePatientHandler, repo=patient_repo)
        update_patient_handler = providers.Factory(UpdatePatientHandler, repo=patient_repo)
        delete_patient_handler = providers.Factory(DeletePatientHandler, repo=patient_repo)
        update_settings_handler = providers.Factory(
            UpdateTenantSettingsHandler,
            repo=tenant_settings_repo,
            credential_repo=credential_repo,
        )

        # Handlers de query
        list_patients_handler = providers.Factory(ListPatientsHandler, repo=patient_repo)
        get_patient_handler   = providers.Factory(GetPatientHandler, repo=patient_repo)
        get_settings_handler  = providers.Factory(GetTenantSettingsHandler, repo=tenant_settings_repo)

        def init(self):
            cmd_bus = self.command_bus()
            cmd_bus.register(CreatePatientCommand, self.create_patient_handler())
            cmd_bus.register(UpdatePatientCommand, self.update_patient_handler())
            cmd_bus.register(DeletePatientCommand, self.delete_patient_handler())
            cmd_bus.register(UpdateTenantSettingsCommand, self.update_settings_handler())

            qry_bus = self.query_bus()
            qry_bus.register(ListPatientsQuery, self.list_patients_handler())
            qry_bus.register(GetPatientQuery, self.get_patient_handler())
            qry_bus.register(GetTenantSettingsQuery, self.get_settings_handler())

    # ------- INSTANCIAÇÃO E CONFIG -------
    container = Container()
    container.config.encryption_key.from_value(settings.ENCRYPTION_KEY)
    Container.init(container)
    return container
