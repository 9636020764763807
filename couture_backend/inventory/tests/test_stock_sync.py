# inventory/tests/test_stock_sync.py

from decimal import Decimal

from django.test import TestCase

from inventory.models import InventoryItem, StockMovement
from inventory.services.adjustments import adjust_stock
from inventory.services.exceptions import (
    InsufficientStockError,
    InventoryItemNotFound,
    StockAdjustmentError,
)
from inventory.services.stock_sync import (
    MaterialLine,
    StockLine,
    check_inventory_availability,
    deduct_inventory_for_order,
    deduct_required_materials,
    restore_inventory_for_order,
    update_inventory_stock,
)


def _item(name, qty, product_type="Other", unit="pieces"):
    return InventoryItem.objects.create(
        name=name, product_type=product_type, quantity=Decimal(str(qty)), unit=unit
    )


class DeductInventoryTests(TestCase):
    """
    GUARANTEES:
    - Name/type lines deduct greedily across matches, oldest first
    - Direct-id lines are all-or-nothing
    - Shortages are reported with the exact texts, not raised
    - Every change writes a ledger movement
    """

    def test_greedy_deduction_by_type(self):
        a = _item("Red Silk", 3, "Lehenga Fabric")
        b = _item("Blue Silk", 5, "Lehenga Fabric")

        result = deduct_inventory_for_order([StockLine("Lehenga Fabric", Decimal("6"))])

        a.refresh_from_db()
        b.refresh_from_db()
        self.assertTrue(result.success)
        self.assertEqual(a.quantity, Decimal("0"))
        self.assertEqual(b.quantity, Decimal("2"))
        self.assertEqual(StockMovement.objects.count(), 2)

    def test_name_match_wins_over_type(self):
        by_name = _item("Buttons", 4, "Other")
        by_type = _item("Gold Buttons", 10, "Buttons")

        deduct_inventory_for_order([("Buttons", 2)])

        by_name.refresh_from_db()
        by_type.refresh_from_db()
        self.assertEqual(by_name.quantity, Decimal("2"))
        self.assertEqual(by_type.quantity, Decimal("10"))

    def test_partial_shortage_message(self):
        _item("Zari Roll", 2, "Zari Border")

        result = deduct_inventory_for_order([("Zari Border", 5)])

        self.assertFalse(result.success)
        self.assertEqual(result.missing_items, ["Zari Border (3 units short)"])

    def test_not_found_message(self):
        result = deduct_inventory_for_order([("Velvet", 1)])
        self.assertEqual(result.missing_items, ["Velvet - not found in inventory"])

    def test_direct_id_all_or_nothing(self):
        item = _item("Lining", "1.5", "Lining Fabric")

        result = deduct_inventory_for_order([(str(item.id), "2.5")])

        item.refresh_from_db()
        self.assertEqual(item.quantity, Decimal("1.5"))
        self.assertEqual(result.missing_items, ["Lining (1 units short)"])

    def test_direct_id_missing(self):
        result = deduct_inventory_for_order([("2f1b7c0e-0000-4000-8000-000000000000", 1)])
        self.assertEqual(
            result.missing_items, ["Item with ID 2f1b7c0e-0000-4000-8000-000000000000 not found"]
        )

    def test_strict_rolls_back(self):
        ok = _item("Hooks", 10, "Hooks & Eyes")

        with self.assertRaises(InsufficientStockError) as ctx:
            deduct_inventory_for_order([("Hooks", 4), ("Sequins", 1)], strict=True)

        ok.refresh_from_db()
        self.assertEqual(ok.quantity, Decimal("10"))
        self.assertEqual(ctx.exception.missing_items, ["Sequins - not found in inventory"])
        self.assertEqual(StockMovement.objects.count(), 0)


class UpdateInventoryStockTests(TestCase):
    def test_type_without_stock_reports_bare_type(self):
        _item("Empty Beads", 0, "Beads")
        result = update_inventory_stock([("Beads", 2)])
        self.assertEqual(result.missing_items, ["Beads"])

    def test_type_deduction_short(self):
        _item("Elastic Roll", 1, "Elastic")
        result = update_inventory_stock([("Elastic", 3)])
        self.assertEqual(result.missing_items, ["Elastic (2 units short)"])


class AvailabilityTests(TestCase):
    def test_shortage_texts(self):
        item = _item("Mirror Pack", 2, "Mirror Work")
        _item("Cotton A", 1, "Cotton Fabric")
        _item("Cotton B", 1, "Cotton Fabric")

        result = check_inventory_availability(
            [(str(item.id), 5), ("Cotton Fabric", 3), ("Organza", 1)]
        )

        self.assertFalse(result.available)
        self.assertEqual(
            result.shortages,
            [
                "Mirror Pack - need 5, have 2",
                "Cotton Fabric - need 3, have 2",
                "Organza - not in inventory",
            ],
        )

    def test_available(self):
        _item("Silk Thread Red", 20, "Silk Thread")
        result = check_inventory_availability([("Silk Thread", 5)])
        self.assertTrue(result.available)
        self.assertEqual(result.shortages, [])


class RequiredMaterialTests(TestCase):
    def test_deducts_when_enough(self):
        item = _item("Dupatta Net", 5, "Dupatta Fabric", unit="meters")
        result = deduct_required_materials(
            [MaterialLine(str(item.id), "Dupatta Net", Decimal("2.5"), "meters")]
        )
        item.refresh_from_db()
        self.assertTrue(result.success)
        self.assertEqual(item.quantity, Decimal("2.5"))
        self.assertEqual(result.movements[0].reason, StockMovement.Reason.MATERIAL_DEDUCTION)

    def test_short_uses_material_unit(self):
        item = _item("Dupatta Net", 1, "Dupatta Fabric", unit="meters")
        result = deduct_required_materials(
            [{"item_id": str(item.id), "name": "Dupatta Net", "quantity": 3, "unit": "meters"}]
        )
        self.assertEqual(result.missing_items, ["Dupatta Net (2 meters short)"])

    def test_missing_material(self):
        result = deduct_required_materials(
            [{"item_id": "not-a-uuid", "name": "Ghost Lace", "quantity": 1}]
        )
        self.assertEqual(result.missing_items, ["Ghost Lace - not found in inventory"])


class RestoreTests(TestCase):
    def test_restore_to_first_match(self):
        first = _item("Beads A", 0, "Beads")
        second = _item("Beads B", 0, "Beads")

        result = restore_inventory_for_order([("Beads", 4)])

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertTrue(result.success)
        self.assertEqual(first.quantity, Decimal("4"))
        self.assertEqual(second.quantity, Decimal("0"))

    def test_restore_missing(self):
        result = restore_inventory_for_order([("Velvet", 1)])
        self.assertEqual(result.errors, ["Velvet - not found for restoration"])


class AdjustStockTests(TestCase):
    def test_out_below_zero_rejected(self):
        item = InventoryItem.objects.create(name="Zip", quantity=Decimal("2"))
        with self.assertRaises(StockAdjustmentError):
            adjust_stock(item=item, quantity_delta="-3")
        item.refresh_from_db()
        self.assertEqual(item.quantity, Decimal("2"))

    def test_deleted_item(self):
        item = InventoryItem.objects.create(name="Zip", quantity=Decimal("2"))
        InventoryItem.objects.filter(pk=item.pk).delete()
        with self.assertRaises(InventoryItemNotFound):
            adjust_stock(item=item, quantity_delta="1")
