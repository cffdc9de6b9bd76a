import os

from shiny import reactive, render
from shiny.express import input, ui
from shinywidgets import render_plotly

# Import organized modules
from src.config import CLAIMS_SOURCE, COUNTY_SHAPEFILE, LABORFORCE_SOURCE, STATE_NAME
from src.data_manager import load_payload
from src.geography import load_county_geojson
from src.plotting import create_choropleth_map, create_claims_chart
from src.reports import render_report

# ======================================================
#  REACTIVE STATE
# ======================================================
# Load once on startup; values stay in-memory until app restart.
payload_store = reactive.Value(
    load_payload(
        os.getenv("CLAIMS_SOURCE", CLAIMS_SOURCE),
        os.getenv("LABORFORCE_SOURCE", LABORFORCE_SOURCE),
    )
)
geojson_store = reactive.Value(
    load_county_geojson(os.getenv("COUNTY_SHAPEFILE", COUNTY_SHAPEFILE))
)

COUNTY_CHOICES = [record.unit_key for record in payload_store.get()["records"]]
DEFAULT_COUNTY = COUNTY_CHOICES[0] if COUNTY_CHOICES else None


@reactive.calc
def selected_record():
    record_set = payload_store.get()["records"]
    return record_set.get(input.county())


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title=f"{STATE_NAME} unemployment claims by county",
    fillable=False,
    full_width=True,
    lang="en",
)

with ui.sidebar(open="always", position="right"):
    ui.input_select("county", "County", COUNTY_CHOICES, selected=DEFAULT_COUNTY)

with ui.navset_tab(id="main_tabs"):
    with ui.nav_panel("County"):

        @render.text
        def county_report():
            record = selected_record()
            if record is None:
                return "No data for this county."
            return render_report(record, len(payload_store.get()["records"]))

        @render_plotly
        def claims_plot():
            record = selected_record()
            if record is None:
                return None
            return create_claims_chart(payload_store.get()["claims"], record)

    with ui.nav_panel("State map"):

        @render_plotly
        def state_map():
            return create_choropleth_map(payload_store.get()["records"], geojson_store.get())

    with ui.nav_panel("Data"):

        @render.data_frame
        def records_table():
            return render.DataGrid(
                payload_store.get()["records"].to_frame(), height=800, filters=True
            )
