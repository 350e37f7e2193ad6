"""
Seed rows for the test store.

Dates are deliberately mixed ISO / DD-MM-YYYY, as in real DLD exports.
"""


def _tx(transaction_id, instance_date, area, building, worth, size_sqm, **extra):
    row = {
        'transaction_id': transaction_id,
        'instance_date': instance_date,
        'area_name_en': area,
        'building_name_en': building,
        'project_name_en': extra.pop('project', building),
        'master_project_en': extra.pop('master_project', area),
        'property_type_en': extra.pop('property_type', 'Unit'),
        'property_sub_type_en': extra.pop('sub_type', 'Flat'),
        'property_usage_en': extra.pop('usage', 'Residential'),
        'reg_type_en': extra.pop('reg_type', 'Ready'),
        'trans_group_en': extra.pop('trans_group', 'Sales'),
        'procedure_name_en': 'Sell',
        'rooms_en': extra.pop('rooms', '1 B/R'),
        'has_parking': extra.pop('has_parking', 1),
        'procedure_area': size_sqm,
        'actual_worth': worth,
        'meter_sale_price': extra.pop('meter_sale_price', round(worth / size_sqm, 2) if size_sqm else None),
        'nearest_metro_en': 'Sobha Realty Metro Station',
        'nearest_mall_en': 'Marina Mall',
        'nearest_landmark_en': 'Burj Al Arab',
    }
    assert not extra, f"unknown fixture keys: {sorted(extra)}"
    return row


SEED_ROWS = [
    # One 2 B/R unit in Marina Gate 1 sold three times: 1.0M -> 1.2M -> 1.1M
    _tx('TX001', '2019-03-10', 'Marsa Dubai', 'Marina Gate 1', 1_000_000, 92.90,
        project='Marina Gate', master_project='Dubai Marina', rooms='2 B/R',
        meter_sale_price=10764.0),
    _tx('TX002', '15-06-2021', 'Marsa Dubai', 'Marina Gate 1', 1_200_000, 92.95,
        project='Marina Gate', master_project='Dubai Marina', rooms='2 B/R'),
    _tx('TX003', '2023-11-01', 'Marsa Dubai', 'Marina Gate 1', 1_100_000, 92.88,
        project='Marina Gate', master_project='Dubai Marina', rooms='2 B/R'),
    # Different unit, same building
    _tx('TX004', '2022-01-20', 'Marsa Dubai', 'Marina Gate 1', 800_000, 70.0,
        project='Marina Gate', master_project='Dubai Marina', rooms='1 B/R'),
    _tx('TX005', '2024-02-05', 'Jumeirah Village Circle', 'Binghatti Stars', 450_000, 35.0,
        reg_type='Off-plan', rooms='Studio', sub_type='Studio'),
    _tx('TX006', '10-07-2024', 'Jumeirah Village Circle', 'Bloom Towers', 700_000, 65.0),
    _tx('TX007', '2024-05-01', 'Business Bay', 'Executive Tower B', 2_000_000, 120.0,
        trans_group='Mortgage'),
    _tx('TX008', '2024-08-15', 'Business Bay', 'Executive Tower B', 3_000_000, 150.0,
        usage='Commercial', sub_type='Office', rooms=None),
    # No area: excluded from every query
    _tx('TX009', '2023-09-09', '', 'Ghost Tower', 500_000, 50.0),
    _tx('TX010', '2020-12-31', None, 'Ghost Tower', 600_000, 50.0),
    # LIKE wildcard characters in a stored name
    _tx('TX011', '2024-03-03', 'Al Barsha South Fourth', 'Tower_A', 900_000, 80.0),
    _tx('TX012', '2024-03-03', 'Al Barsha South Fourth', 'TowerXA', 900_000, 80.0),
    # Zero-value record: listed, but excluded from rollups
    _tx('TX013', '2018-05-05', 'Marsa Dubai', 'Marina Gate 2', 0, 60.0,
        master_project='Dubai Marina', meter_sale_price=0.0),
]

# Rows with a non-empty area
VISIBLE_IDS = {r['transaction_id'] for r in SEED_ROWS if r['area_name_en']}
