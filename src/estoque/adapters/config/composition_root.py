from dependency_injector import containers, providers

container = None

def setup_di_container_from_settings(settings):
    """Inicializa o container do estoque. Reaproveita buses e dispatcher do core."""
    global container  # noqa: PLW0603
    if container is not None:
        import structlog
        structlog.get_logger().debug("DI container (estoque) já inicializado.")
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    from clinica_core.adapters.config.composition_root import setup_di_container_from_settings as setup_core
    from estoque.adapters.repositories.lot_repo_impl import LotRepoImpl
    from estoque.adapters.repositories.movement_repo_impl import MovementRepoImpl
    from estoque.adapters.repositories.product_repo_impl import ProductRepoImpl
    from estoque.adapters.repositories.stock_ledger_impl import StockLedgerImpl

    # Commands
    from estoque.core.application.commands.lot_commands import CreateLotCommand, DeleteLotCommand, UpdateLotCommand
    from estoque.core.application.commands.movement_commands import RecordMovementCommand
    from estoque.core.application.commands.product_commands import (
        CreateProductCommand,
        DeleteProductCommand,
        UpdateProductCommand,
    )

    # Handlers
    from estoque.core.application.handlers.lot_handlers import (
        CreateLotHandler,
        DeleteLotHandler,
        GetLotHandler,
        ListLotsHandler,
        UpdateLotHandler,
    )
    from estoque.core.application.handlers.movement_handlers import (
        GetMovementHandler,
        ListMovementsHandler,
        RecordMovementHandler,
    )
    from estoque.core.application.handlers.product_handlers import (
        CreateProductHandler,
        DeleteProductHandler,
        GetProductBalanceHandler,
        GetProductHandler,
        ListProductsHandler,
        UpdateProductHandler,
    )

    # Queries
    from estoque.core.application.queries.stock_queries import (
        GetLotQuery,
        GetMovementQuery,
        GetProductBalanceQuery,
        GetProductQuery,
        ListLotsQuery,
        ListMovementsQuery,
        ListProductsQuery,
    )
    from estoque.core.application.services.stock_event_publisher import count_movement, warn_low_stock
    from estoque.core.domain.events.stock_events import LowStockReachedEvent, StockMovementRecordedEvent

    core = setup_core(settings)

    class Container(containers.DeclarativeContainer):
        core_container = providers.DependenciesContainer()

        event_dispatcher = core_container.event_dispatcher
        command_bus      = core_container.command_bus
        query_bus        = core_container.query_bus

        # Repositórios
        product_repo  = providers.Singleton(ProductRepoImpl)
        lot_repo      = providers.Singleton(LotRepoImpl)
        movement_repo = providers.Singleton(MovementRepoImpl)
        stock_ledger  = providers.Singleton(StockLedgerImpl)

        # Handlers de comando
        create_product_handler  = providers.Factory(CreateProductHandler, ledger=stock_ledger)
        update_product_handler  = providers.Factory(UpdateProductHandler, repo=product_repo)
        delete_product_handler  = providers.Factory(DeleteProductHandler, repo=product_repo)
        create_lot_handler      = providers.Factory(CreateLotHandler,     ledger=stock_ledger)
        update_lot_handler      = providers.Factory(UpdateLotHandler,     ledger=stock_ledger)
        delete_lot_handler      = providers.Factory(DeleteLotHandler,     ledger=stock_ledger)
        record_movement_handler = providers.Factory(RecordMovementHandler, ledger=stock_ledger)

        # Handlers de query
        list_products_handler      = providers.Factory(ListProductsHandler,      repo=product_repo)
        get_product_handler        = providers.Factory(GetProductHandler,        repo=product_repo)
        get_product_balance_handler = providers.Factory(GetProductBalanceHandler, repo=product_repo, ledger=stock_ledger)
        list_lots_handler          = providers.Factory(ListLotsHandler,          repo=lot_repo)
        get_lot_handler            = providers.Factory(GetLotHandler,            repo=lot_repo)
        list_movements_handler     = providers.Factory(ListMovementsHandler,     repo=movement_repo)
        get_movement_handler       = providers.Factory(GetMovementHandler,       repo=movement_repo)

        def init(self):
            cmd_bus = self.command_bus()
            cmd_bus.register(CreateProductCommand, self.create_product_handler())
            cmd_bus.register(UpdateProductCommand, self.update_product_handler())
            cmd_bus.register(DeleteProductCommand, self.delete_product_handler())
            cmd_bus.register(CreateLotCommand, self.create_lot_handler())
            cmd_bus.register(UpdateLotCommand, self.update_lot_handler())
            cmd_bus.register(DeleteLotCommand, self.delete_lot_handler())
            cmd_bus.register(RecordMovementCommand, self.record_movement_handler())

            qry_bus = self.query_bus()
            qry_bus.register(ListProductsQuery, self.list_products_handler())
            qry_bus.register(GetProductQuery, self.get_product_handler())
            qry_bus.register(GetProductBalanceQuery, self.get_product_balance_handler())
            qry_bus.register(ListLotsQuery, self.list_lots_handler())
            qry_bus.register(GetLotQuery, self.get_lot_handler())
            qry_bus.register(ListMovementsQuery, self.list_movements_handler())
            qry_bus.register(GetMovementQuery, self.get_movement_handler())

            dispatcher = self.event_dispatcher()
            dispatcher.subscribe(StockMovementRecordedEvent, count_movement)
            dispatcher.subscribe(LowStockReachedEvent, warn_low_stock)

    # ------- INSTANCIAÇÃO E CONFIG -------
    container = Container(core_container=core)
    Container.init(container)
    return container
