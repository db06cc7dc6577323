from dependency_injector import containers, providers

container = None

def setup_di_container_from_settings(settings):
    """Inicializa o container financeiro. Reaproveita buses, dispatcher e repositórios do core."""
    global container  # noqa: PLW0603
    if container is not None:
        import structlog
        structlog.get_logger().debug("DI container (financeiro) já inicializado.")
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    from clinica_core.adapters.config.composition_root import setup_di_container_from_settings as setup_core
    from financeiro.adapters.api_clients.asaas_api_client import AsaasAPIClient
    from financeiro.adapters.repositories.charge_repo_impl import ChargeRepoImpl
    from financeiro.adapters.repositories.reconciliation_repo_impl import ReconciliationRepoImpl
    from financeiro.adapters.repositories.transaction_repo_impl import TransactionRepoImpl
    from financeiro.adapters.repositories.webhook_event_repo_impl import WebhookEventRepoImpl

    # Commands
    from financeiro.core.application.commands.charge_commands import (
        CreateChargeCommand,
        DeleteChargeCommand,
        RegenerateChargeLinkCommand,
        UpdateChargeCommand,
    )
    from financeiro.core.application.commands.transaction_commands import (
        CreateTransactionCommand,
        DeleteTransactionCommand,
        UpdateTransactionCommand,
    )
    from financeiro.core.application.commands.webhook_commands import (
        ProcessProviderWebhookCommand,
        RetryReconciliationsCommand,
    )

    # Handlers
    from financeiro.core.application.handlers.charge_handlers import (
        CreateChargeHandler,
        DeleteChargeHandler,
        GetChargeHandler,
        ListChargesHandler,
        RegenerateChargeLinkHandler,
        UpdateChargeHandler,
    )
    from financeiro.core.application.handlers.transaction_handlers import (
        CreateTransactionHandler,
        DeleteTransactionHandler,
        GetTransactionHandler,
        ListTransactionsHandler,
        UpdateTransactionHandler,
    )
    from financeiro.core.application.handlers.webhook_handlers import (
        ProcessProviderWebhookHandler,
        RetryReconciliationsHandler,
    )

    # Queries
    from financeiro.core.application.queries.financeiro_queries import (
        GetChargeQuery,
        GetTransactionQuery,
        ListChargesQuery,
        ListTransactionsQuery,
    )

    # Serviços
    from financeiro.core.application.services.charge_event_listeners import log_charge_created, log_status_change
    from financeiro.core.application.services.charge_service import ChargeService
    from financeiro.core.application.services.customer_service import CustomerService
    from financeiro.core.application.services.reconciliation_service import ReconciliationService
    from financeiro.core.application.services.webhook_reconciler import WebhookReconciler
    from financeiro.core.domain.events.charge_events import ChargeCreatedEvent, ChargeStatusChangedEvent

    core = setup_core(settings)

    class Container(containers.DeclarativeContainer):
        core_container = providers.DependenciesContainer()

        event_dispatcher = core_container.event_dispatcher
        command_bus      = core_container.command_bus
        query_bus        = core_container.query_bus

        # Um cliente por chamada: o token é do médico autenticado
        asaas_client_factory = providers.Factory(AsaasAPIClient)

        # Repositórios
        charge_repo         = providers.Singleton(ChargeRepoImpl)
        transaction_repo    = providers.Singleton(TransactionRepoImpl)
        reconciliation_repo = providers.Singleton(ReconciliationRepoImpl)
        webhook_event_repo  = providers.Singleton(WebhookEventRepoImpl)

        # Serviços
        customer_service = providers.Singleton(CustomerService, patient_repo=core_container.patient_repo)
        charge_service = providers.Singleton(
            ChargeService,
            charge_repo=charge_repo,
            settings_repo=core_container.tenant_settings_repo,
            credential_repo=core_container.credential_repo,
            reconciliation_repo=reconciliation_repo,
            customer_service=customer_service,
            gateway_factory=asaas_client_factory.provider,
            dispatcher=event_dispatcher,
        )
        webhook_reconciler = providers.Singleton(
            WebhookReconciler,
            verifier=core_container.webhook_verifier,
            charge_repo=charge_repo,
            event_repo=webhook_event_repo,
            dispatcher=event_dispatcher,
        )
        reconciliation_service = providers.Singleton(
            ReconciliationService,
            repo=reconciliation_repo,
            credential_repo=core_container.credential_repo,
            gateway_factory=asaas_client_factory.provider,
        )

        # Handlers de comando
        create_charge_handler      = providers.Factory(CreateChargeHandler,         service=charge_service)
        update_charge_handler      = providers.Factory(UpdateChargeHandler,         service=charge_service)
        delete_charge_handler      = providers.Factory(DeleteChargeHandler,         service=charge_service)
        regenerate_charge_handler  = providers.Factory(RegenerateChargeLinkHandler, service=charge_service)
        webhook_handler            = providers.Factory(ProcessProviderWebhookHandler, reconciler=webhook_reconciler)
        retry_reconciliations_handler = providers.Factory(RetryReconciliationsHandler, service=reconciliation_service)
        create_transaction_handler = providers.Factory(
            CreateTransactionHandler, repo=transaction_repo, charge_repo=charge_repo
        )
        update_transaction_handler = providers.Factory(
            UpdateTransactionHandler, repo=transaction_repo, charge_repo=charge_repo
        )
        delete_transaction_handler = providers.Factory(DeleteTransactionHandler, repo=transaction_repo)

        # Handlers de query
        list_charges_handler      = providers.Factory(ListChargesHandler,      repo=charge_repo)
        get_charge_handler        = providers.Factory(GetChargeHandler,        repo=charge_repo)
        list_transactions_handler = providers.Factory(ListTransactionsHandler, repo=transaction_repo)
        get_transaction_handler   = providers.Factory(GetTransactionHandler,   repo=transaction_repo)

        def init(self):
            cmd_bus = self.command_bus()
            cmd_bus.register(CreateChargeCommand, self.create_charge_handler())
            cmd_bus.register(UpdateChargeCommand, self.update_charge_handler())
            cmd_bus.register(DeleteChargeCommand, self.delete_charge_handler())
            cmd_bus.register(RegenerateChargeLinkCommand, self.regenerate_charge_handler())
            cmd_bus.register(ProcessProviderWebhookCommand, self.webhook_handler())
            cmd_bus.register(RetryReconciliationsCommand, self.retry_reconciliations_handler())
            cmd_bus.register(CreateTransactionCommand, self.create_transaction_handler())
            cmd_bus.register(UpdateTransactionCommand, self.update_transaction_handler())
            cmd_bus.register(DeleteTransactionCommand, self.delete_transaction_handler())

            qry_bus = self.query_bus()
            qry_bus.register(ListChargesQuery, self.list_charges_handler())
            qry_bus.register(GetChargeQuery, self.get_charge_handler())
            qry_bus.register(ListTransactionsQuery, self.list_transactions_handler())
            qry_bus.register(GetTransactionQuery, self.get_transaction_handler())

            dispatcher = self.event_dispatcher()
            dispatcher.subscribe(ChargeCreatedEvent, log_charge_created)
            dispatcher.subscribe(ChargeStatusChangedEvent, log_status_change)

    # ------- INSTANCIAÇÃO E CONFIG -------
    container = Container(core_container=core)
    Container.init(container)
    return container
