"""
HTML bodies for the transactional emails.

Each ``render_*`` function returns a complete HTML document.  Values
coming from users (names, addresses, slot labels) are escaped.
"""

from datetime import date
from html import escape
from typing import Dict

from ..schemas.booking import BookingRead


STATUS_TEMPLATES: Dict[str, Dict[str, str]] = {
    "pending": {
        "title": "⏳ Booking Pending Review",
        "message": "Your booking has been moved back to pending and is awaiting review by our team.",
        "color": "#f59e0b",
        "icon": "⏳",
        "footer": "<p>We will email you again once your booking is confirmed.</p>",
    },
    "confirmed": {
        "title": "✅ Booking Confirmed",
        "message": "Great news! Your booking has been confirmed by our team.",
        "color": "#10b981",
        "icon": "✅",
        "footer": "<p><strong>🎉 You're all set!</strong> Please be ready 5 minutes before your scheduled time.</p>",
    },
    "completed": {
        "title": "🎊 Service Completed",
        "message": "Thank you for using our service! We hope you had a great experience.",
        "color": "#6366f1",
        "icon": "🎊",
        "footer": "<p>We would love to hear your feedback! Please rate your experience.</p>",
    },
    "cancelled": {
        "title": "❌ Booking Cancelled",
        "message": "Your booking has been cancelled.",
        "color": "#ef4444",
        "icon": "❌",
        "footer": "<p>If you have any questions about this cancellation, please contact us.</p>",
    },
}


def format_date(value: date) -> str:
    """``2025-06-01`` -> ``Sunday, June 1, 2025``."""
    return f"{value:%A, %B} {value.day}, {value.year}"


def _service_name(booking: BookingRead) -> str:
    return escape(booking.service.name) if booking.service else "(service unavailable)"


def _duration(booking: BookingRead) -> str:
    return f"{booking.service.duration} minutes" if booking.service else "-"


def render_booking_received(booking: BookingRead, contact_email: str) -> str:
    user_name = escape(booking.user.name) if booking.user else "there"
    return f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
      <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
          <h1>🎉 Booking Received!</h1>
        </div>
        <div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px;">
          <p>Hi <strong>{user_name}</strong>,</p>
          <p>We have received your booking request. Here are your booking details:</p>
          <table style="background: white; padding: 20px; border-radius: 8px; width: 100%;">
            <tr><td><strong>Service:</strong></td><td>{_service_name(booking)}</td></tr>
            <tr><td><strong>Date:</strong></td><td>{format_date(booking.booking_date)}</td></tr>
            <tr><td><strong>Time:</strong></td><td>{escape(booking.time_slot)}</td></tr>
            <tr><td><strong>Duration:</strong></td><td>{_duration(booking)}</td></tr>
            <tr><td><strong>Address:</strong></td><td>{escape(booking.address)}</td></tr>
            <tr><td><strong>Total Amount:</strong></td><td><strong>${booking.total_price:.2f}</strong></td></tr>
            <tr><td><strong>Status:</strong></td><td><span style="background: #fbbf24; color: white; padding: 5px 15px; border-radius: 20px;">PENDING APPROVAL</span></td></tr>
          </table>
          <p><strong>⏳ What's Next?</strong></p>
          <p>Your booking is currently pending approval. Our team will review and confirm your booking shortly. You will receive another email once your booking is confirmed.</p>
          <p>Thank you for choosing our service!</p>
          <p>Best regards,<br><strong>Service Booking Team</strong></p>
        </div>
        <div style="text-align: center; margin-top: 30px; color: #777; font-size: 12px;">
          <p>Need help? Contact us at {escape(contact_email)}</p>
        </div>
      </div>
    </body>
    </html>
    """


def render_status_update(booking: BookingRead, status: str, contact_email: str) -> str:
    config = STATUS_TEMPLATES[status]
    user_name = escape(booking.user.name) if booking.user else "there"
    return f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
      <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: {config['color']}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
          <h1>{config['title']}</h1>
        </div>
        <div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px;">
          <p>Hi <strong>{user_name}</strong>,</p>
          <p>{config['message']}</p>
          <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>Service:</strong> {_service_name(booking)}</p>
            <p><strong>Date:</strong> {format_date(booking.booking_date)}</p>
            <p><strong>Time:</strong> {escape(booking.time_slot)}</p>
            <p><strong>Status:</strong> <span style="color: {config['color']}; font-weight: bold; font-size: 18px;">{status.upper()}</span></p>
          </div>
          {config['footer']}
          <p>Best regards,<br><strong>Service Booking Team</strong></p>
        </div>
        <div style="text-align: center; margin-top: 30px; color: #777; font-size: 12px;">
          <p>Contact us at {escape(contact_email)}</p>
        </div>
      </div>
    </body>
    </html>
    """


def render_admin_alert(booking: BookingRead, admin_url: str) -> str:
    user = booking.user
    return f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
      <div style="max-width: 600px; margin: 0 auto; padding: 20px; background: #f9f9f9;">
        <div style="background: #dc2626; color: white; padding: 20px; text-align: center;">
          <h2>🔔 New Booking Alert</h2>
        </div>
        <div style="background: white; padding: 20px; margin-top: 10px;">
          <div style="background: #fef3c7; padding: 15px; border-left: 4px solid #f59e0b; margin: 15px 0;">
            <strong>⚠️ Action Required:</strong> A new booking is pending your approval.
          </div>
          <div style="background: #e0e7ff; padding: 15px; border-radius: 5px; margin: 15px 0;">
            <h3>👤 Customer Information</h3>
            <p><strong>Name:</strong> {escape(user.name) if user else "-"}</p>
            <p><strong>Email:</strong> {escape(user.email) if user else "-"}</p>
            <p><strong>Phone:</strong> {escape(user.phone or "-") if user else "-"}</p>
            <p><strong>Address:</strong> {escape(booking.address)}</p>
          </div>
          <div style="background: #dbeafe; padding: 15px; border-radius: 5px; margin: 15px 0;">
            <h3>📋 Booking Details</h3>
            <p><strong>Service:</strong> {_service_name(booking)}</p>
            <p><strong>Date:</strong> {format_date(booking.booking_date)}</p>
            <p><strong>Time:</strong> {escape(booking.time_slot)}</p>
            <p><strong>Duration:</strong> {_duration(booking)}</p>
            <p><strong>Amount:</strong> ${booking.total_price:.2f}</p>
          </div>
          <p><strong>📌 Next Steps:</strong></p>
          <ol>
            <li>Log in to the admin panel</li>
            <li>Review the booking details</li>
            <li>Confirm or reject the booking</li>
          </ol>
          <p style="text-align: center; margin-top: 20px;">
            <a href="{escape(admin_url)}" style="background: #dc2626; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; display: inline-block;">View in Admin Panel</a>
          </p>
        </div>
      </div>
    </body>
    </html>
    """
