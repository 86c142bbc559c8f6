"""One object = full bounded context «pricing»."""
from pricebook.ddd import DomainModule
from pricebook.pricing.application import (
    AddPromotion,
    CalculatePrice,
    CalculatedPriceDTO,
    CalculateSavingsSummary,
    ClonePromotion,
    GenerateShelfLabel,
    GetPriceEntry,
    ListActivePromotions,
    PriceEntryUseCases,
    PromotionUseCases,
    RemovePromotion,
    ScheduleBasePrice,
    SetBasePrice,
    SetBulkTiers,
    ShelfLabelUseCases,
)
from pricebook.pricing.domain import PriceEntry, PriceEntryRepository
from pricebook.pricing.infrastructure import InMemoryPriceEntryRepository

pricing_module = (
    DomainModule("pricing")
    .aggregate(PriceEntry)
    .repository(PriceEntryRepository, InMemoryPriceEntryRepository)
    .command(SetBasePrice, PriceEntryUseCases, "set_base_price")
    .command(ScheduleBasePrice, PriceEntryUseCases, "schedule_base_price")
    .command(SetBulkTiers, PriceEntryUseCases, "set_bulk_tiers")
    .command(AddPromotion, PriceEntryUseCases, "add_promotion")
    .command(RemovePromotion, PriceEntryUseCases, "remove_promotion")
    .command(ClonePromotion, PromotionUseCases, "clone_promotion")
    .query(GetPriceEntry, PriceEntryUseCases, "get_price_entry")
    .query(CalculatePrice, PriceEntryUseCases, "calculate_price", present=CalculatedPriceDTO.from_domain)
    .query(CalculateSavingsSummary, PriceEntryUseCases, "calculate_savings_summary")
    .query(ListActivePromotions, PromotionUseCases, "list_active_promotions")
    .query(GenerateShelfLabel, ShelfLabelUseCases, "generate_shelf_label")
)
