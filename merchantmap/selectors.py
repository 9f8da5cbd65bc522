"""Centralised selectors for the merchant locator search UI."""

START_URL = "https://www.jfcard.co.jp/shopinfo/use.php"

# ==== REGIONS (prefecture list) ====
REGION_ITEMS = ".area_list.area_pref_list ul li ul li"
REGION_LABEL = "input"
REGION_EXPAND = 'a[href="javascript:;"]'
NEXT_REGION_LINK = ".area_city_list .common_search_nav a"

# ==== CATEGORIES (genre checklist) ====
CATEGORY_ITEMS = "#genre_list ul li"
CATEGORY_LABEL = "input"
CATEGORY_TOGGLE = "a"

# ==== SEARCH FORM ====
SEARCH_SUBMIT = "#search_submit_basic"
PAGE_SIZE = 'select[name="posts_per_page"]'
SEARCH_SUMMARY = "#search_result_text"

# ==== RESULT LIST ====
RESULT_LIST = "#search_result_lists"
RESULT_ROWS = "#search_result_lists .search_result_lists_details"
ROW_TITLE = "h4"
ROW_ADDRESS = ".search_result_lists_address"

# ==== PAGINATION ====
PAGINATION_CURRENT = "#search_result_pagination li.selected a"
PAGINATION_NEXT = "#search_result_pagination li.next"
PAGINATION_NEXT_LINK = "#search_result_pagination li.next a"

# Attribute holding the human readable label of region/category checkboxes.
LABEL_ATTRIBUTE = "data-label"

# Entries that are not CSS selectors.
NON_SELECTOR_CONSTANTS = {"START_URL", "LABEL_ATTRIBUTE"}
