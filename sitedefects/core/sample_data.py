from sitedefects.core.schemas import DefectRecord, DefectStatus

C, P, W, N, X = (
    DefectStatus.COMPLETED,
    DefectStatus.PENDING,
    DefectStatus.FIXED_WAIT_APPROVAL,
    DefectStatus.NO_DEFECT,
    DefectStatus.NOT_CHECKED,
)

# (id, category, location, total, fixed, status, target date, note)
_ROWS = [
    ("101", "รูปด้านอาคาร", "Building Facade (รูปด้านอาคาร)", 19, 19, C, None, None),
    ("201", "ดาดฟ้า", "Rooftop (ดาดฟ้า)", 10, 10, C, None, None),
    ("202", "ห้องเครื่อง/ห้องส่วนกลาง", "Rooftop Pump Room", 3, 3, C, None, None),
    ("302", "โถงทางเดิน", "Floor 2", 16, 16, C, None, None),
    ("303", "โถงทางเดิน", "Floor 3", 23, 23, W, None, "รอ CM ตัด"),
    ("304", "โถงทางเดิน", "Floor 4", 23, 23, W, None, "รอ CM ตัด"),
    ("305", "โถงทางเดิน", "Floor 5", 39, 39, W, "5/2/69", "เก็บงานแล้วเสร็จ"),
    ("306", "โถงทางเดิน", "Floor 6", 39, 0, P, "1/3/69", None),
    ("307", "โถงทางเดิน", "Floor 7", 32, 0, P, "1/3/69", None),
    ("308", "โถงทางเดิน", "Floor 8", 9, 0, P, "26/2/69", None),
    ("401", "บันได", "Stairs ST-1", 43, 0, P, "10/2/69", None),
    ("402", "บันได", "Stairs ST-2", 32, 0, P, "13/2/69", None),
    ("501", "ห้องเครื่อง/ห้องส่วนกลาง", "ลานจอดชั้น 1", 13, 0, P, "6/2/69", "แล้วเสร็จ 6/2/69"),
    ("502", "ห้องเครื่อง/ห้องส่วนกลาง", "Security Room (ห้องรปภ.)", 4, 0, P, "5/2/69", "แก้ไขแล้วเสร็จ 5/2/69"),
    ("503", "ห้องเครื่อง/ห้องส่วนกลาง", "MDB Room", 9, 0, P, "7/2/69", None),
    ("504", "ห้องเครื่อง/ห้องส่วนกลาง", "Juristic Room (นิติ)", 17, 17, W, "4/2/69", None),
    ("505", "ห้องเครื่อง/ห้องส่วนกลาง", "Laundry Room (ซักรีด)", 10, 10, W, "4/2/69", None),
    ("506", "ห้องเครื่อง/ห้องส่วนกลาง", "Pump Room Floor 1", 9, 9, W, "4/2/69", None),
    ("507", "ห้องเครื่อง/ห้องส่วนกลาง", "Security Toilet (น้ำรปภ)", 5, 5, W, "4/2/69", None),
    ("508", "ห้องเครื่อง/ห้องส่วนกลาง", "Garbage Room (Main)", 19, 0, P, "19/2/69", None),
    ("602", "ห้องขยะประจำชั้น", "Floor 2", 0, 0, N, None, None),
    ("603", "ห้องขยะประจำชั้น", "Floor 3", 0, 0, N, None, None),
    ("604", "ห้องขยะประจำชั้น", "Floor 4", 0, 0, X, "5/2/69", "เก็บของงานระบบ"),
    ("605", "ห้องขยะประจำชั้น", "Floor 5", 7, 7, W, "5/2/69", None),
    ("606", "ห้องขยะประจำชั้น", "Floor 6", 8, 8, W, "5/2/69", None),
    ("607", "ห้องขยะประจำชั้น", "Floor 7", 9, 9, W, "5/2/69", None),
    ("608", "ห้องขยะประจำชั้น", "Floor 8", 9, 9, W, "5/2/69", None),
    ("702", "ห้องไฟฟ้าประจำชั้น", "Floor 2", 2, 0, P, None, None),
    ("703", "ห้องไฟฟ้าประจำชั้น", "Floor 3", 2, 0, P, None, None),
    ("704", "ห้องไฟฟ้าประจำชั้น", "Floor 4", 3, 0, P, None, None),
    ("705", "ห้องไฟฟ้าประจำชั้น", "Floor 5", 2, 0, P, None, None),
    ("706", "ห้องไฟฟ้าประจำชั้น", "Floor 6", 3, 0, P, None, None),
    ("707", "ห้องไฟฟ้าประจำชั้น", "Floor 7", 3, 0, P, None, None),
    ("708", "ห้องไฟฟ้าประจำชั้น", "Floor 8", 3, 0, P, None, None),
]


def initial_defects() -> list[DefectRecord]:
    return [
        DefectRecord(
            id=rid,
            category=category,
            location=location,
            total_defects=total,
            fixed_defects=fixed,
            status=status,
            target_date=target,
            note=note,
        )
        for rid, category, location, total, fixed, status, target, note in _ROWS
    ]
